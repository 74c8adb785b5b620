"""
API package for the Electricity Price API.
Contains FastAPI route handlers and the bearer token gate.
"""

from .dependencies import require_token
from .routes import router

__all__ = [
    "require_token",
    "router",
]
