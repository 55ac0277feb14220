"""
estat/connectors/base.py

Base connector abstraction and shared HTTP mechanics.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from estat.domain.statistics import TableDescriptor

logger = logging.getLogger(__name__)

AUTH_HTTP_STATUS_CODES = {401, 403}


class ConnectorRequestError(RuntimeError):
    """
    Raised when a connector request fails.

    `status_code` is the HTTP status when the server answered, and
    `api_status` the API-level result status when the body reported one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        api_status: str | None = None,
        auth_failure: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.api_status = api_status
        self._auth_failure = auth_failure

    @property
    def is_auth_failure(self) -> bool:
        if self._auth_failure is not None:
            return self._auth_failure
        return self.status_code in AUTH_HTTP_STATUS_CODES


class BaseConnector:
    """
    Thin JSON-over-HTTP client shared by API connectors.

    Requests are issued once; failures surface as `ConnectorRequestError`
    and are never retried here.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        timeout_seconds: float,
        session: requests.Session | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._timeout_seconds = timeout_seconds

    def _request_json(
        self,
        *,
        method: str,
        url: str,
        context: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        Execute an HTTP request and return parsed JSON.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                headers=headers,
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.error(
                "Connector request failed source=%s context=%s url=%s error=%s",
                self.source,
                context,
                url,
                exc,
            )
            raise ConnectorRequestError(
                f"{self.source} ({context}): No response received from server."
            ) from exc

        if not response.ok:
            message = self._describe_error_response(response)
            logger.error(
                "Connector request failed source=%s context=%s status=%s url=%s error=%s",
                self.source,
                context,
                response.status_code,
                url,
                message,
            )
            raise ConnectorRequestError(
                f"{self.source} ({context}): Status {response.status_code} - {message}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(
                f"{self.source} ({context}): response was not valid JSON.",
                status_code=response.status_code,
            ) from exc

    def _describe_error_response(self, response: requests.Response) -> str:
        """
        Extract a human-readable message from a non-2xx response.
        """

        return response.reason or "Unknown API error"


class StatisticsClient(Protocol):
    """
    Search, metadata and data operations the pipeline depends on.
    """

    def search(
        self,
        keyword: str = "",
        survey_years: str = "",
        stats_field: str = "",
        limit: int = 20,
    ) -> list[TableDescriptor]:
        ...

    def fetch_metadata(self, table_id: str) -> dict[str, Any]:
        ...

    def fetch_data(self, table_id: str) -> dict[str, Any]:
        ...
