"""
Hosted Database Client

Async HTTP client for the Supabase REST (PostgREST) and auth (GoTrue) APIs.
Requests made on behalf of a shopper carry their access token so that the
database's row-level security applies.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Any

import httpx

from ..core.config import Settings, settings

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when the hosted database rejects or fails a request"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class AuthUser:
    """Authenticated user as reported by the auth API"""
    id: str
    email: Optional[str] = None


class SupabaseClient:
    """
    Client for the hosted database.

    Usage:
        client = SupabaseClient(url, anon_key)
        user = await client.get_user(access_token)
        await client.insert("orders", {...}, access_token=access_token)
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co
            anon_key: Public anon API key
            timeout: Request timeout in seconds
            transport: Optional transport override
        """
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _headers(self, access_token: Optional[str] = None) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        access_token: Optional[str] = None,
        params: Optional[dict[str, str]] = None,
        body: Optional[Any] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        headers = self._headers(access_token)
        if extra_headers:
            headers.update(extra_headers)

        try:
            response = await self._http_client.request(
                method=method,
                url=f"{self.base_url}{path}",
                headers=headers,
                params=params,
                json=body,
            )
        except httpx.HTTPError as e:
            raise BackendError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Backend request failed: {response.status_code} - {response.text}")
            raise BackendError(_error_message(response), status_code=response.status_code)

        return response

    # ==================== Auth ====================

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """Resolve an access token to a user; invalid tokens give None"""
        try:
            response = await self._request("GET", "/auth/v1/user", access_token=access_token)
        except BackendError as e:
            if e.status_code in (401, 403):
                return None
            raise

        try:
            data = response.json()
            return AuthUser(id=data["id"], email=data.get("email"))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Malformed auth response: {response.text}")
            raise BackendError("Malformed auth response", status_code=response.status_code) from e

    # ==================== Tables ====================

    async def insert(
        self,
        table: str,
        row: dict[str, Any],
        access_token: Optional[str] = None,
    ) -> None:
        """Insert a row"""
        await self._request(
            "POST",
            f"/rest/v1/{table}",
            access_token=access_token,
            body=row,
            extra_headers={"Prefer": "return=minimal"},
        )

    async def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        access_token: Optional[str] = None,
        order: Optional[str] = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Select rows matching equality filters.

        Args:
            table: Table name
            filters: Column -> value, combined with AND
            access_token: Shopper's token
            order: PostgREST order clause, e.g. "created_at.desc"
            columns: Columns to return
        """
        params = {"select": columns, **_eq_filters(filters)}
        if order:
            params["order"] = order

        response = await self._request(
            "GET", f"/rest/v1/{table}", access_token=access_token, params=params
        )
        try:
            rows = response.json()
        except ValueError as e:
            raise BackendError(f"Malformed response from {table}", status_code=response.status_code) from e
        if not isinstance(rows, list):
            raise BackendError(f"Malformed response from {table}", status_code=response.status_code)
        return rows

    async def select_one(
        self,
        table: str,
        filters: dict[str, Any],
        access_token: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Select a single row, or None when nothing matches"""
        rows = await self.select(table, filters, access_token=access_token)
        return rows[0] if rows else None

    async def update(
        self,
        table: str,
        values: dict[str, Any],
        filters: dict[str, Any],
        access_token: Optional[str] = None,
    ) -> None:
        """Update rows matching equality filters"""
        await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            access_token=access_token,
            params=_eq_filters(filters),
            body=values,
            extra_headers={"Prefer": "return=minimal"},
        )


def _eq_filters(filters: Optional[dict[str, Any]]) -> dict[str, str]:
    return {column: f"eq.{value}" for column, value in (filters or {}).items()}


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        for key in ("message", "msg", "error_description", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {response.status_code}"


def build_supabase_client(config: Settings) -> Optional[SupabaseClient]:
    """Create the client, or None when the hosted database is not configured"""
    if not config.backend_configured:
        logger.warning("Hosted database not configured - orders will not be stored")
        return None
    return SupabaseClient(
        base_url=config.supabase_url,
        anon_key=config.supabase_anon_key,
        timeout=config.supabase_timeout,
    )


# Singleton instance
supabase_client = build_supabase_client(settings)


def get_supabase_client() -> Optional[SupabaseClient]:
    return supabase_client
