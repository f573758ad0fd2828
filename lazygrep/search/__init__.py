"""Search runs: configuration, matching, tree walking, and orchestration."""

from .config import CaseMode, SearchConfig, SearchConfigError, SortKey
from .matcher import Matcher, PatternError, compile_pattern
from .orchestrator import Finished, NewEntry, SearchEvent, SearchFailed, SearchOrchestrator, SearchRun

__all__ = [
    "CaseMode",
    "SearchConfig",
    "SearchConfigError",
    "SortKey",
    "Matcher",
    "PatternError",
    "compile_pattern",
    "Finished",
    "NewEntry",
    "SearchEvent",
    "SearchFailed",
    "SearchOrchestrator",
    "SearchRun",
]
