"""Context viewer: highlighted file window around the selected match."""

from .context_viewer import ContextViewer, ContextViewerState, ViewerLayout, window_start
from .highlighting import SegmentStyle, highlight_file, highlight_source

__all__ = [
    "ContextViewer",
    "ContextViewerState",
    "ViewerLayout",
    "window_start",
    "SegmentStyle",
    "highlight_file",
    "highlight_source",
]
