from .email import router as email_router
from .events import router as events_router

__all__ = ["email_router", "events_router"]
