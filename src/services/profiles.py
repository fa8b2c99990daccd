"""Profile store backed by the Supabase PostgREST API.

Profiles live in the ``profiles`` table keyed by the auth user id.  A missing
row is not an error: ``get_profile`` returns ``None`` and the caller decides
what that means.  Transport failures and non-2xx responses raise
``ProfileStoreError``.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import httpx
from pydantic import ValidationError

from src.config import Settings, get_settings
from src.models.tracking import Profile, ProfileUpdate

logger = logging.getLogger("flowtrack.profiles")


class ProfileStoreError(RuntimeError):
    """Raised when the profile store cannot be reached or answers with an error."""


class ProfileStore:
    """Read and update profile rows over PostgREST.

    Usage::

        store = ProfileStore()
        profile = await store.get_profile(user_id)
        if profile is None:
            ...
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            settings:    App settings (Supabase URL, keys, timeout).
            http_client: Optional pre-configured httpx client (for testing).
        """
        s = settings or get_settings()
        self._url = f"{s.supabase_url.rstrip('/')}/rest/v1/{s.profile_table}"
        self._api_key = s.supabase_service_role_key
        self._timeout = s.profile_request_timeout_s
        self._http_client = http_client

    def _build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def get_profile(self, user_id: UUID) -> Profile | None:
        """Fetch one user's profile.

        Args:
            user_id: Auth user id (the ``profiles.id`` primary key).

        Returns:
            The Profile, or None if no row exists.

        Raises:
            ProfileStoreError: On network errors, non-2xx responses, or
                               unparseable rows.
        """
        rows = await self._request(
            "GET",
            params={"id": f"eq.{user_id}", "select": "*", "limit": "1"},
        )
        if not rows:
            logger.info("No profile found for user %s", user_id)
            return None
        return self._parse(rows[0])

    async def update_profile(self, user_id: UUID, changes: ProfileUpdate) -> Profile | None:
        """Apply a partial update and return the updated profile.

        Returns:
            The updated Profile, or None if no row exists for ``user_id``.

        Raises:
            ProfileStoreError: On network errors or non-2xx responses.
        """
        rows = await self._request(
            "PATCH",
            params={"id": f"eq.{user_id}"},
            json=changes.model_dump(exclude_unset=True),
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            return None
        return self._parse(rows[0])

    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        params: dict[str, str],
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        request_headers = self._build_headers(headers)
        try:
            if self._http_client:
                response = await self._http_client.request(
                    method, self._url, params=params, json=json, headers=request_headers
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.request(
                        method, self._url, params=params, json=json, headers=request_headers
                    )
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Profile store %s failed: HTTP %d", method, exc.response.status_code
            )
            raise ProfileStoreError(
                f"Profile store returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Profile store %s failed: %s", method, exc)
            raise ProfileStoreError(f"Profile store unreachable: {exc}") from exc
        except ValueError as exc:
            raise ProfileStoreError("Profile store returned invalid JSON") from exc

        if not isinstance(rows, list):
            raise ProfileStoreError(f"Expected a list of rows, got {type(rows).__name__}")
        return rows

    @staticmethod
    def _parse(row: dict[str, Any]) -> Profile:
        try:
            return Profile.model_validate(row)
        except ValidationError as exc:
            raise ProfileStoreError(f"Invalid profile row: {exc}") from exc
