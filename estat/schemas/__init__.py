"""
estat/schemas package marker.
"""

from estat.schemas.pipeline import RunOutcomeResponse
from estat.schemas.run_options import OUTPUT_FORMATS, RunOptions

__all__ = [
    "OUTPUT_FORMATS",
    "RunOptions",
    "RunOutcomeResponse",
]
