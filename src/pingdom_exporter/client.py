"""
Pingdom Check Status Client

Thin async client for the Pingdom API 2.0 check listing:
- Single-account auth (username, password, App-Key)
- Multi-account auth (adds Account-Email)
- Pydantic models for the check records the exporter consumes

Each call is a single attempt. Every failure surfaces as a FetchError
subclass so callers only have one exception family to handle.
"""

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pingdom_exporter.errors import (
    PingdomAPIError,
    PingdomConnectionError,
    PingdomResponseError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.pingdom.com/api/2.0"


# ============================================================================
# MODELS
# ============================================================================


class CheckTag(BaseModel):
    """Tag attached to a check."""
    name: str
    type: Optional[str] = None
    count: Optional[int] = None


class CheckRecord(BaseModel):
    """A single check as returned by GET /checks."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    name: str = ""
    hostname: str = ""
    resolution: int = Field(0, description="Check interval in minutes")
    paused: bool = False
    status: str = ""
    last_response_time: int = Field(0, alias="lastresponsetime", ge=0,
                                    description="Last response time in ms")
    tags: List[CheckTag] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tag_names(cls, v):
        """Accept bare tag names alongside tag objects."""
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("tags must be a list")
        return [{"name": t} if isinstance(t, str) else t for t in v]

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]


# ============================================================================
# CLIENT
# ============================================================================


class PingdomClient:
    """
    Async Pingdom API client.

    Usage:
        client = PingdomClient("user@example.com", "secret", "app-key")
        checks = await client.list_checks(include_tags=True)
        await client.close()
    """

    def __init__(
        self,
        username: str,
        password: str,
        api_key: str,
        account_email: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            username: Pingdom account username
            password: Pingdom account password
            api_key: Application key sent as App-Key
            account_email: Owner of the target account in multi-account mode
            base_url: API root, overridable for testing
            timeout: Total request timeout in seconds (None waits forever)
        """
        self.base_url = base_url.rstrip("/")
        self.account_email = account_email
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._auth = aiohttp.BasicAuth(username, password)
        self._headers = {"App-Key": api_key}
        if account_email:
            self._headers["Account-Email"] = account_email
        self.session: Optional[aiohttp.ClientSession] = None

    @property
    def multi_account(self) -> bool:
        return self.account_email is not None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                auth=self._auth,
                headers=self._headers,
                timeout=self.timeout,
            )
        return self.session

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def list_checks(self, include_tags: bool = True) -> List[CheckRecord]:
        """
        Fetch every check visible to the configured account.

        Args:
            include_tags: Ask Pingdom to embed tag objects in each check

        Returns:
            Check records in the order Pingdom returned them

        Raises:
            PingdomAPIError: Pingdom responded with status >= 400
            PingdomConnectionError: Network failure or timeout
            PingdomResponseError: Body is not a valid check listing
        """
        session = await self._ensure_session()
        params = {"include_tags": "true"} if include_tags else {}
        url = f"{self.base_url}/checks"

        try:
            async with session.get(url, params=params) as response:
                if response.status >= 400:
                    raise await self._api_error(response)
                try:
                    payload = await response.json(content_type=None)
                except ValueError as e:
                    raise PingdomResponseError(f"Invalid JSON from {url}: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise PingdomConnectionError(
                f"Request to {url} failed: {e.__class__.__name__}: {e}"
            ) from e

        checks = self._parse_checks(payload)
        logger.debug(f"Fetched {len(checks)} checks from {url}")
        return checks

    @staticmethod
    async def _api_error(response: aiohttp.ClientResponse) -> PingdomAPIError:
        """Build an API error from Pingdom's {"error": {...}} body when present."""
        status_desc = response.reason or ""
        message = ""
        try:
            body = await response.json(content_type=None)
        except (ValueError, aiohttp.ClientError):
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            status_desc = error.get("statusdesc") or status_desc
            message = error.get("errormessage") or ""
        return PingdomAPIError(response.status, status_desc, message)

    @staticmethod
    def _parse_checks(payload: Any) -> List[CheckRecord]:
        if not isinstance(payload, dict) or not isinstance(payload.get("checks"), list):
            raise PingdomResponseError("Response has no 'checks' list")
        try:
            return [CheckRecord.model_validate(raw) for raw in payload["checks"]]
        except ValidationError as e:
            raise PingdomResponseError(
                f"Malformed check record: {e.error_count()} validation error(s)",
                context={"errors": e.errors(include_url=False)},
            ) from e
