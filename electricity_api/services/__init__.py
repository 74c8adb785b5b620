"""
Services package for the Electricity Price API.
Contains the credential/token service and the in-memory price dataset service.
"""

from .auth_service import AuthService
from .data_service import DatasetSnapshot, PriceDataService

__all__ = [
    "AuthService",
    "DatasetSnapshot",
    "PriceDataService",
]
