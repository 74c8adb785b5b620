"""
FastAPI route handlers for the main API endpoints.
Implements login, the protected price query and a health check.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from electricity_api.api.dependencies import get_auth_service, get_data_service, require_token
from electricity_api.exceptions import (
    CredentialsMissingError,
    InternalServerError,
    InvalidCredentialsError,
    PriceAPIException,
    RegionNotFoundError,
    RegionQueryMissingError,
)
from electricity_api.logging_config import get_logger
from electricity_api.models.auth import LoginRequest, LoginResponse, TokenPayload
from electricity_api.models.price import HealthResponse, RegionListResponse, RegionPriceResponse
from electricity_api.services.auth_service import AuthService
from electricity_api.services.data_service import PriceDataService

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(data_service: PriceDataService = Depends(get_data_service)):
    """
    Health check endpoint for monitoring and load balancers.
    Reports whether a dataset snapshot is live and how large it is.
    """
    loaded_at = data_service.loaded_at
    details = {
        "service": "electricity-price-api",
        "dataset_loaded": data_service.is_loaded,
        "record_count": data_service.record_count,
        "state_count": len(data_service.get_distinct_regions()),
        "loaded_at": loaded_at.isoformat() if loaded_at else None,
    }

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        details=details
    )


@router.post("/auth/login", response_model=LoginResponse)
async def login(
    credentials: Optional[LoginRequest] = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Exchange a username and password for a bearer token.

    Returns:
        LoginResponse with the signed token and its lifetime in seconds.

    Raises:
        CredentialsMissingError: 400 if either field is missing or blank.
        InvalidCredentialsError: 401 if the pair does not match a configured user.
    """
    credentials = credentials or LoginRequest()
    username = credentials.username
    password = credentials.password

    if not username or not password or not username.strip() or not password.strip():
        raise CredentialsMissingError()

    try:
        if not auth_service.verify_credentials(username, password):
            logger.info("Login rejected", username=username)
            raise InvalidCredentialsError()

        result = auth_service.issue_token(username)

    except PriceAPIException:
        raise
    except Exception as e:
        logger.error("Login error", error=str(e), username=username)
        raise InternalServerError()

    logger.info("Login succeeded", username=username)
    return result


@router.get("/price", response_model=RegionPriceResponse)
async def get_price(
    state: Optional[str] = Query(
        default=None,
        description="Region code, matched exactly and case-sensitively"
    ),
    user: TokenPayload = Depends(require_token),
    data_service: PriceDataService = Depends(get_data_service),
):
    """
    Get the mean price for a region.

    The dataset is loaded on the first query if startup did not load it.

    Returns:
        RegionPriceResponse with the mean price and record count.

    Raises:
        RegionQueryMissingError: 400 if state is missing or blank.
        RegionNotFoundError: 404 if the region has no records.
        DatasetError: 500 if the dataset cannot be loaded.
    """
    if state is None or state.strip() == '':
        raise RegionQueryMissingError()

    try:
        await data_service.ensure_loaded()
        result = data_service.get_region_summary(state)

    except PriceAPIException:
        raise
    except Exception as e:
        logger.error("Unexpected error", error=str(e), state=state, username=user.username)
        raise InternalServerError()

    if result is None:
        raise RegionNotFoundError(f"No data found for state: {state}")

    return result


@router.get("/price/states", response_model=RegionListResponse)
async def get_states(
    user: TokenPayload = Depends(require_token),
    data_service: PriceDataService = Depends(get_data_service),
):
    """
    List every region in the dataset, in first-seen order.
    """
    try:
        await data_service.ensure_loaded()
        states = data_service.get_distinct_regions()

    except PriceAPIException:
        raise
    except Exception as e:
        logger.error("Unexpected error", error=str(e), username=user.username)
        raise InternalServerError()

    return RegionListResponse(states=states)
