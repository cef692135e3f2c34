"""
Contact Inbox API Routers
FastAPI router modules for the contact message service.
"""
from backend.api import health, messages

__all__ = [
    "health",
    "messages",
]
