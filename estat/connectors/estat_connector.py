"""
estat/connectors/estat_connector.py

e-Stat (Japanese government statistics portal) REST API connector.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from estat.config import EStatSettings
from estat.connectors.base import BaseConnector, ConnectorRequestError
from estat.domain.statistics import TableDescriptor, as_list

logger = logging.getLogger(__name__)

# RESULT.STATUS values: 0 = ok, 1 = ok but nothing matched, 2 = ok with partial errors.
SUCCESS_STATUSES = {"0", "1", "2"}
NO_DATA_STATUS = "1"
# 100 = application ID missing or rejected.
AUTH_FAILURE_STATUSES = {"100"}

RESPONSE_ROOTS = ("GET_STATS_LIST", "GET_META_INFO", "GET_STATS_DATA")


class EStatConnector(BaseConnector):
    """
    Connector for the e-Stat search, metadata and statistical data endpoints.
    """

    def __init__(
        self,
        *,
        settings: EStatSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(
            source="e-Stat API",
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )
        if not settings.app_id:
            raise ValueError(
                "e-Stat API Application ID is required. Please set ESTAT_APP_ID environment variable."
            )
        self._settings = settings

    def search(
        self,
        keyword: str = "",
        survey_years: str = "",
        stats_field: str = "",
        limit: int = 20,
    ) -> list[TableDescriptor]:
        """
        Search statistical tables; returns an empty list when nothing matched.
        """

        params: dict[str, Any] = {"limit": limit}
        if keyword:
            params["searchWord"] = keyword
        if survey_years:
            params["surveyYears"] = survey_years
        if stats_field:
            params["statsField"] = stats_field

        root, status = self._call("getStatsList", "GET_STATS_LIST", params, context="getStatsList")
        if status == NO_DATA_STATUS:
            return []

        datalist = root.get("DATALIST_INF") or {}
        tables: list[TableDescriptor] = []
        for entry in as_list(datalist.get("TABLE_INF") if isinstance(datalist, dict) else None):
            if not isinstance(entry, dict) or not entry.get("@id"):
                logger.warning("Skipping e-Stat table entry without an id entry=%s", entry)
                continue
            tables.append(TableDescriptor.from_table_inf(entry))
        return tables

    def fetch_metadata(self, table_id: str) -> dict[str, Any]:
        """
        Return the `METADATA_INF` document for one table.
        """

        root, _ = self._call(
            "getMetaInfo",
            "GET_META_INFO",
            {"statsDataId": table_id},
            context=f"getMetaInfo for {table_id}",
        )
        metadata = root.get("METADATA_INF")
        if not isinstance(metadata, dict):
            raise ConnectorRequestError(
                f"e-Stat API Error (getMetaInfo for {table_id}): response has no METADATA_INF."
            )
        return metadata

    def fetch_data(self, table_id: str) -> dict[str, Any]:
        """
        Return the `STATISTICAL_DATA` payload for one table.
        """

        root, _ = self._call(
            "getStatsData",
            "GET_STATS_DATA",
            {"statsDataId": table_id},
            context=f"getStatsData for {table_id}",
        )
        data = root.get("STATISTICAL_DATA")
        if not isinstance(data, dict):
            raise ConnectorRequestError(
                f"e-Stat API Error (getStatsData for {table_id}): response has no STATISTICAL_DATA."
            )
        return data

    def _call(
        self,
        endpoint: str,
        root_key: str,
        params: dict[str, Any],
        *,
        context: str,
    ) -> tuple[dict[str, Any], str]:
        payload = self._request_json(
            method="GET",
            url=f"{self._settings.base_url.rstrip('/')}/json/{endpoint}",
            context=context,
            params={
                "appId": self._settings.app_id,
                "lang": self._settings.lang,
                **params,
            },
        )

        root = payload.get(root_key) if isinstance(payload, dict) else None
        if not isinstance(root, dict):
            raise ConnectorRequestError(f"e-Stat API Error ({context}): unexpected response shape.")

        result = root.get("RESULT") or {}
        status = str(result.get("STATUS", "")).strip()
        if status not in SUCCESS_STATUSES:
            message = result.get("ERROR_MSG") or "Unknown error"
            raise ConnectorRequestError(
                f"e-Stat API Error ({context}): {message}",
                api_status=status or None,
                auth_failure=status in AUTH_FAILURE_STATUSES,
            )
        return root, status

    def _describe_error_response(self, response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return super()._describe_error_response(response)

        if isinstance(body, dict):
            for root_key in RESPONSE_ROOTS:
                root = body.get(root_key)
                if isinstance(root, dict):
                    message = (root.get("RESULT") or {}).get("ERROR_MSG")
                    if message:
                        return str(message)
        return "Unknown API error"
