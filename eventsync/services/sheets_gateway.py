"""Spreadsheet gateway client.

The gateway is a single Apps Script web app endpoint. Every request is a JSON
object ``{"action": <name>, ...payload}`` and every reply a JSON envelope with
an integer ``status`` and optional ``error``.
"""
from typing import Any, Dict, List, Optional

import httpx
from pydantic_core import to_jsonable_python
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from eventsync.core import constants
from eventsync.core.exceptions import RemoteError
from eventsync.core.logging_config import get_logger

logger = get_logger(__name__)


class SheetResponse(BaseModel):
    """Reply envelope returned by the gateway.

    Unknown keys are kept so callers can pass the reply through untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: Optional[int] = None
    error: Optional[str] = None
    spreadsheet_id: Optional[str] = Field(None, alias="spreadsheetId")
    row_number: Optional[int] = Field(None, alias="rowNumber")
    reg_code: Optional[str] = None
    success: Optional[bool] = None
    tab_name: Optional[str] = Field(None, alias="tabName")
    updated: Optional[bool] = None
    found: Optional[bool] = None

    @property
    def failed(self) -> bool:
        return self.status is not None and self.status >= 400


class SheetsGateway:
    """Async client for the spreadsheet gateway."""

    def __init__(
        self,
        url: Optional[str],
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        # Apps Script answers with a redirect to the script's content host
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._owns_client = client is None

    @property
    def configured(self) -> bool:
        return bool(self.url)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def post(self, action: str, data: Optional[Dict[str, Any]] = None) -> SheetResponse:
        """
        Send one action to the gateway.

        Args:
            action: Gateway action name
            data: Payload merged into the request body next to ``action``

        Returns:
            SheetResponse: The decoded envelope

        Raises:
            RemoteError: If the gateway is not configured or unreachable, the
                HTTP status is not 2xx, the body is not a JSON object, or the
                envelope reports ``status >= 400``
        """
        if not self.url:
            raise RemoteError("Sheets gateway URL is not configured", action=action)

        body = to_jsonable_python({"action": action, **(data or {})})
        logger.debug("gateway_request", action=action)

        try:
            response = await self._client.post(self.url, json=body)
        except httpx.HTTPError as exc:
            logger.warning("gateway_unreachable", action=action, error=str(exc))
            raise RemoteError(f"Sheets gateway unreachable: {exc}", action=action) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            message = (
                constants.GATEWAY_FALLBACK_ERROR
                if response.is_success
                else f"Sheets gateway error: {response.status_code} {response.text[:200]}"
            )
            raise RemoteError(message, action=action, status_code=response.status_code)

        try:
            envelope = SheetResponse.model_validate(payload)
        except ValidationError as exc:
            raise RemoteError(f"Malformed gateway response: {exc}", action=action) from exc

        if not response.is_success or envelope.failed:
            message = envelope.error or constants.GATEWAY_FALLBACK_ERROR
            logger.warning(
                "gateway_error",
                action=action,
                http_status=response.status_code,
                status=envelope.status,
                error=message,
            )
            raise RemoteError(
                message,
                action=action,
                status_code=envelope.status or response.status_code,
            )

        return envelope

    # Direct spreadsheet helpers. The coordinator uses the sync* actions; these
    # address a known spreadsheet and tab.

    async def create_spreadsheet(self, title: str) -> SheetResponse:
        return await self.post(constants.ACTION_CREATE_EVENT, {"eventName": title, "problemStatements": []})

    async def create_tab(self, spreadsheet_id: str, tab_name: str) -> SheetResponse:
        return await self.post(constants.ACTION_CREATE_TAB, {"spreadsheetId": spreadsheet_id, "tabName": tab_name})

    async def upsert_registration_row(
        self, spreadsheet_id: str, tab_name: str, registration: Dict[str, Any]
    ) -> SheetResponse:
        return await self.post(
            constants.ACTION_UPSERT_REGISTRATION,
            {"spreadsheetId": spreadsheet_id, "tabName": tab_name, "registration": registration},
        )

    async def find_row(
        self, spreadsheet_id: str, tab_name: str, search_key: str, search_value: str
    ) -> SheetResponse:
        return await self.post(
            constants.ACTION_FIND_ROW,
            {
                "spreadsheetId": spreadsheet_id,
                "tabName": tab_name,
                "searchKey": search_key,
                "searchValue": search_value,
            },
        )

    async def append_registration_row(
        self, spreadsheet_id: str, tab_name: str, registration: Dict[str, Any]
    ) -> SheetResponse:
        """Update the row holding this reg_code, or append one if there is none."""
        reg_code = registration.get("reg_code")
        if not reg_code:
            raise ValueError("Registration code is required")

        existing = await self.find_row(spreadsheet_id, tab_name, "reg_code", reg_code)
        if existing.found:
            return await self.post(
                constants.ACTION_UPDATE_ROW,
                {
                    "spreadsheetId": spreadsheet_id,
                    "tabName": tab_name,
                    "searchKey": "reg_code",
                    "searchValue": reg_code,
                    "data": registration,
                },
            )
        return await self.post(
            constants.ACTION_APPEND_ROW,
            {"spreadsheetId": spreadsheet_id, "tabName": tab_name, "data": registration},
        )

    async def export_problem(
        self,
        spreadsheet_id: str,
        event_id: str,
        problem_id: str,
        event_name: str,
        problem_title: str,
    ) -> SheetResponse:
        """Ask the gateway to pull a problem statement's registrations into its tab."""
        return await self.post(
            constants.ACTION_EXPORT,
            {
                "eventId": event_id,
                "problemId": problem_id,
                "eventName": event_name,
                "problemTitle": problem_title,
                "spreadsheetId": spreadsheet_id,
            },
        )

    async def bulk_sync(self, events: List[Dict[str, Any]]) -> SheetResponse:
        return await self.post(constants.ACTION_BULK_SYNC, {"events": events})
