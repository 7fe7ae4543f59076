"""Request orchestration and response streaming."""

from .progress_stream import FrameDecoder, ProgressStreamEmitter
from .session_summary_handler import SessionSummaryHandler

__all__ = ["FrameDecoder", "ProgressStreamEmitter", "SessionSummaryHandler"]
