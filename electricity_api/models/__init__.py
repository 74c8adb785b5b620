"""
Data models package for the Electricity Price API.
Contains Pydantic models for price data, authentication and API responses.
"""

from .auth import LoginRequest, LoginResponse, TokenPayload
from .price import (
    ErrorResponse,
    HealthResponse,
    PriceRecord,
    RegionListResponse,
    RegionPriceResponse,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "TokenPayload",
    "PriceRecord",
    "RegionPriceResponse",
    "RegionListResponse",
    "HealthResponse",
    "ErrorResponse",
]
