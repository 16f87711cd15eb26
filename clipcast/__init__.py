"""
ClipCast - Virtual multi-channel clip broadcast

Schedules an append-only corpus of short video clips onto parallel channels:
- Incremental random sampling over a numbered corpus
- Gap-free daily timelines with no same-day repeats per channel
- Cross-channel exclusion at every slot start
- Today/tomorrow window queries for players
"""

__version__ = "1.0.0"
__author__ = "ClipCast Contributors"
__license__ = "MIT"

from clipcast.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
