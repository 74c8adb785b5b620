"""
Pydantic data models for price data and API responses.
Defines the structure for price records and API response formats.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PriceRecord(BaseModel):
    """
    Represents a single electricity price observation.
    
    Based on CSV format:
    state,price,timestamp
    NSW,90.15,2025-06-24 00:00:00
    """
    region: str = Field(
        min_length=1,
        description="Market region code taken from the 'state' column (case-sensitive)"
    )
    price: float = Field(
        allow_inf_nan=False,
        description="Price from the 'price' column - can be negative in some markets"
    )
    timestamp: str = Field(
        min_length=1,
        description="Raw timestamp string from the 'timestamp' column, format not interpreted"
    )
    
    class Config:
        frozen = True


class RegionPriceResponse(BaseModel):
    """
    API response for the price endpoint.
    Returns the mean price and the number of records it was computed from.
    """
    state: str = Field(description="Requested region")
    mean_price: float = Field(alias="meanPrice", description="Arithmetic mean of all prices for the region")
    record_count: int = Field(alias="recordCount", description="Number of records for the region")
    
    class Config:
        populate_by_name = True


class RegionListResponse(BaseModel):
    """
    API response listing every region in the loaded dataset.
    """
    states: List[str] = Field(description="Distinct regions in first-seen order")


class HealthResponse(BaseModel):
    """
    Health check response model.
    """
    status: str = Field(description="Health status")
    timestamp: datetime = Field(description="Health check timestamp")
    details: Optional[dict] = Field(default=None, description="Additional health details")


class ErrorResponse(BaseModel):
    """
    Body returned for every handled error.
    """
    error: str = Field(description="Human readable message")
    code: str = Field(description="Machine readable error code")
