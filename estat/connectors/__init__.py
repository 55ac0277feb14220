"""
estat/connectors package marker.
"""

from estat.connectors.base import BaseConnector, ConnectorRequestError, StatisticsClient
from estat.connectors.estat_connector import EStatConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "EStatConnector",
    "StatisticsClient",
]
