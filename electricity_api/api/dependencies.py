"""
FastAPI dependencies: service lookup on app.state and the bearer token gate.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from electricity_api.exceptions import AuthHeaderMissingError, InvalidTokenError
from electricity_api.logging_config import get_logger
from electricity_api.models.auth import TokenPayload
from electricity_api.services.auth_service import AuthService
from electricity_api.services.data_service import PriceDataService

logger = get_logger(__name__)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_data_service(request: Request) -> PriceDataService:
    return request.app.state.data_service


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Return the token from an 'Authorization: Bearer <token>' value.
    
    Anything other than exactly two space separated parts with the 'Bearer'
    scheme yields None.
    """
    if not authorization:
        return None
    
    parts = authorization.split(' ')
    if len(parts) != 2 or parts[0] != 'Bearer' or not parts[1]:
        return None
    
    return parts[1]


async def require_token(
    authorization: Optional[str] = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenPayload:
    """
    Gate for protected routes.
    
    Raises:
        AuthHeaderMissingError: No usable bearer header was sent
        InvalidTokenError: The token failed signature or expiry checks
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthHeaderMissingError()
    
    payload = auth_service.verify_token(token)
    if payload is None:
        logger.info("Rejected bearer token")
        raise InvalidTokenError()
    
    return payload
