# File: api_client.py
"""Client for the hosted Prayer Tracker backend (PostgREST row store).

Three tables are used:
- prayers: (user_id, date, prayer_name, status), upserted on the natural key
- achievements: (user_id, badge_type), append-only
- profiles: (id, ..., prayer_settings) holding the settings blob

Every request runs under a local timeout. Idempotent calls (selects, the
prayer upsert, the profile settings update) are retried a bounded number of
times with exponential backoff; achievement inserts are sent once.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import aiohttp

from . import const

if TYPE_CHECKING:
    from collections.abc import Mapping


class PrayerTrackerApiError(Exception):
    """Raised when a remote store call fails (HTTP, network or timeout)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        """Initialize with the backend message and optional HTTP status."""
        super().__init__(message)
        self.status = status


class PrayerTrackerPolicyError(PrayerTrackerApiError):
    """Raised when the backend reports an authorization-policy misconfiguration.

    Retrying the same query will not help; callers surface a dedicated
    state offering only retry or sign-out.
    """


def is_policy_error_message(message: str | None) -> bool:
    """Return True when an error message names a recursive/policy failure."""
    lowered = (message or "").lower()
    return any(marker in lowered for marker in const.REMOTE_POLICY_ERROR_MARKERS)


class PrayerTrackerApiClient:
    """Thin async client over the backend REST interface."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str,
        api_key: str,
        access_token: str | None = None,
        timeout: float = const.DEFAULT_REQUEST_TIMEOUT,
        retries: int = const.DEFAULT_REQUEST_RETRIES,
        backoff: float = const.DEFAULT_RETRY_BACKOFF,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session (Home Assistant client session).
            base_url: Backend project URL, e.g. "https://xyz.supabase.co".
            api_key: Public API key sent as the `apikey` header.
            access_token: User JWT; the API key is used when absent.
            timeout: Per-request timeout in seconds.
            retries: Extra attempts for idempotent requests.
            backoff: Initial delay between attempts in seconds, doubled each time.
        """
        self._session = session
        self._rest_url = f"{base_url.rstrip('/')}{const.REMOTE_REST_PATH}"
        self._api_key = api_key
        self._access_token = access_token or api_key
        self._timeout = timeout
        self._retries = retries
        self._backoff = backoff

    # -------------------------------------------------------------------------------------
    # Prayers
    # -------------------------------------------------------------------------------------

    async def async_upsert_prayer(
        self, user_id: str, iso_date: str, prayer_name: str, status: str
    ) -> None:
        """Upsert one prayer row keyed by (user_id, date, prayer_name)."""
        await self._async_request(
            "POST",
            const.REMOTE_TABLE_PRAYERS,
            params={"on_conflict": const.REMOTE_PRAYERS_CONFLICT_KEY},
            payload={
                const.REMOTE_COL_USER_ID: user_id,
                const.REMOTE_COL_PRAYER_NAME: prayer_name,
                const.REMOTE_COL_STATUS: status,
                const.REMOTE_COL_DATE: iso_date,
            },
            prefer="resolution=merge-duplicates,return=minimal",
            idempotent=True,
        )

    async def async_fetch_prayers(
        self, user_id: str, iso_date: str
    ) -> list[dict[str, Any]]:
        """Return the prayer rows (prayer_name, status) for one civil date."""
        rows = await self._async_request(
            "GET",
            const.REMOTE_TABLE_PRAYERS,
            params={
                "select": f"{const.REMOTE_COL_PRAYER_NAME},{const.REMOTE_COL_STATUS}",
                const.REMOTE_COL_USER_ID: f"eq.{user_id}",
                const.REMOTE_COL_DATE: f"eq.{iso_date}",
            },
            idempotent=True,
        )
        return [row for row in rows or [] if isinstance(row, dict)]

    # -------------------------------------------------------------------------------------
    # Achievements
    # -------------------------------------------------------------------------------------

    async def async_insert_achievement(self, user_id: str, badge_type: str) -> None:
        """Append one achievement row."""
        await self._async_request(
            "POST",
            const.REMOTE_TABLE_ACHIEVEMENTS,
            payload={
                const.REMOTE_COL_USER_ID: user_id,
                const.REMOTE_COL_BADGE_TYPE: badge_type,
            },
            prefer="return=minimal",
            idempotent=False,
        )

    async def async_fetch_achievements(self, user_id: str) -> set[str]:
        """Return the badge ids recorded for the user."""
        rows = await self._async_request(
            "GET",
            const.REMOTE_TABLE_ACHIEVEMENTS,
            params={
                "select": const.REMOTE_COL_BADGE_TYPE,
                const.REMOTE_COL_USER_ID: f"eq.{user_id}",
            },
            idempotent=True,
        )
        return {
            row[const.REMOTE_COL_BADGE_TYPE]
            for row in rows or []
            if isinstance(row, dict) and row.get(const.REMOTE_COL_BADGE_TYPE)
        }

    # -------------------------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------------------------

    async def async_fetch_profile(self, user_id: str) -> dict[str, Any] | None:
        """Return the user's profile row, or None when it does not exist."""
        rows = await self._async_request(
            "GET",
            const.REMOTE_TABLE_PROFILES,
            params={
                "select": const.REMOTE_PROFILE_COLUMNS,
                const.REMOTE_COL_ID: f"eq.{user_id}",
                "limit": "1",
            },
            idempotent=True,
        )
        if not rows:
            return None
        return rows[0] if isinstance(rows[0], dict) else None

    async def async_update_prayer_settings(
        self, user_id: str, settings: Mapping[str, Any], updated_at: str
    ) -> None:
        """Replace the prayer_settings blob on the user's profile."""
        await self._async_request(
            "PATCH",
            const.REMOTE_TABLE_PROFILES,
            params={const.REMOTE_COL_ID: f"eq.{user_id}"},
            payload={
                const.REMOTE_COL_PRAYER_SETTINGS: dict(settings),
                const.REMOTE_COL_UPDATED_AT: updated_at,
            },
            prefer="return=minimal",
            idempotent=True,
        )

    # -------------------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------------------

    def _headers(self, prefer: str | None) -> dict[str, str]:
        """Build request headers."""
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _async_request(
        self,
        method: str,
        table: str,
        params: Mapping[str, str] | None = None,
        payload: Mapping[str, Any] | None = None,
        prefer: str | None = None,
        idempotent: bool = True,
    ) -> Any:
        """Send a request, retrying idempotent calls on transport failures.

        Policy errors and 4xx responses are never retried.

        Raises:
            PrayerTrackerPolicyError: Backend policy misconfiguration.
            PrayerTrackerApiError: Any other HTTP, network or timeout failure.
        """
        attempts = 1 + (self._retries if idempotent else 0)
        delay = self._backoff

        # Every attempt but the last may be retried; the last one raises
        for attempt in range(1, attempts):
            try:
                return await self._async_send_once(method, table, params, payload, prefer)
            except PrayerTrackerPolicyError:
                raise
            except PrayerTrackerApiError as err:
                if err.status is not None and err.status < 500:
                    raise
                const.LOGGER.debug(
                    "Retrying %s %s after error (attempt %s/%s): %s",
                    method,
                    table,
                    attempt,
                    attempts,
                    err,
                )
            await asyncio.sleep(delay)
            delay *= 2

        return await self._async_send_once(method, table, params, payload, prefer)

    async def _async_send_once(
        self,
        method: str,
        table: str,
        params: Mapping[str, str] | None,
        payload: Mapping[str, Any] | None,
        prefer: str | None,
    ) -> Any:
        """Send a single request and decode the response body."""
        url = f"{self._rest_url}/{table}"
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session.request(
                    method,
                    url,
                    params=dict(params or {}),
                    json=dict(payload) if payload is not None else None,
                    headers=self._headers(prefer),
                ) as response:
                    if response.status >= 400:
                        body = _decode_error_body(await response.text())
                        message = _error_message(body, response.status)
                        if is_policy_error_message(message):
                            raise PrayerTrackerPolicyError(message, response.status)
                        raise PrayerTrackerApiError(message, response.status)
                    if response.status == 204:
                        return None
                    text = await response.text()
                    if not text:
                        return None
                    return json.loads(text)
        except TimeoutError as err:
            raise PrayerTrackerApiError(
                f"Timeout after {self._timeout}s calling {method} {table}"
            ) from err
        except aiohttp.ClientError as err:
            raise PrayerTrackerApiError(f"Network error calling {table}: {err}") from err
        except ValueError as err:
            # Undecodable JSON body
            raise PrayerTrackerApiError(
                f"Invalid response from {table}: {err}"
            ) from err


def _decode_error_body(text: str) -> Any:
    """Decode an error body, keeping non-JSON text (e.g. a proxy HTML page)."""
    try:
        return json.loads(text) if text else None
    except ValueError:
        return text


def _error_message(body: Any, status: int) -> str:
    """Extract the backend error message from an error body."""
    if isinstance(body, dict):
        for key in ("message", "error_description", "error", "hint"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {status}"
