"""
estat/api/routers package marker.
"""

from estat.api.routers.statistics_ingestion import router as statistics_ingestion_router

__all__ = ["statistics_ingestion_router"]
