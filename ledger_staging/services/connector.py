from typing import Any, List, Optional, Protocol

import httpx

from ledger_staging.core.config import settings
from ledger_staging.core.exceptions import UpstreamError
from ledger_staging.core.logging import get_logger
from ledger_staging.schemas.export import ExportRow

logger = get_logger(__name__)


class AccountingConnector(Protocol):
    def export(self, company: str, rows: List[ExportRow]) -> Any:
        """Send rows for ``company``; return the ack payload or raise UpstreamError"""
        ...


def _response_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class HttpAccountingConnector:
    """
    Client for the accounting connector HTTP endpoint.

    POSTs ``{"company": ..., "data": [...]}`` as JSON. Every request is
    bounded by ``timeout`` and never retried here; callers retry on
    UpstreamError if they want to.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url or settings.connector_url
        self.timeout = timeout if timeout is not None else settings.connector_timeout_seconds
        self.transport = transport

    def export(self, company: str, rows: List[ExportRow]) -> Any:
        payload = {
            "company": company,
            "data": [row.model_dump(mode="json") for row in rows],
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload)
        except httpx.HTTPError as err:
            logger.error("Accounting connector unreachable", extra={"url": self.url, "error": str(err)})
            raise UpstreamError("Failed to send data to accounting connector", detail=str(err)) from err

        if response.is_error:
            detail = _response_detail(response)
            logger.error(
                "Accounting connector rejected export",
                extra={"url": self.url, "status_code": response.status_code, "detail": detail},
            )
            raise UpstreamError("Failed to send data to accounting connector", detail=detail)

        return _response_detail(response)


def get_connector() -> AccountingConnector:
    """FastAPI dependency; overridden in tests"""
    return HttpAccountingConnector()
