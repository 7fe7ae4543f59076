from .session_summary import router as session_summary_router

__all__ = ["session_summary_router"]
