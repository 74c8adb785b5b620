"""
Pydantic models for the login flow and bearer token payloads.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """
    Login request body.
    
    Both fields are optional in the schema so that a missing value is reported
    as missing credentials instead of a validation error.
    """
    username: Optional[str] = Field(default=None, description="Configured user name")
    password: Optional[str] = Field(default=None, description="Plaintext password")


class LoginResponse(BaseModel):
    """
    Successful login response.
    """
    token: str = Field(description="Signed bearer token (JWT, HS256)")
    expires_in: int = Field(alias="expiresIn", description="Token lifetime in seconds")
    
    class Config:
        populate_by_name = True


class TokenPayload(BaseModel):
    """
    Claims carried by a bearer token.
    
    Field names match the JWT claims on the wire: iat and exp are epoch seconds.
    """
    username: str = Field(description="User the token was issued to")
    iat: int = Field(description="Issued at (epoch seconds)")
    exp: int = Field(description="Expires at (epoch seconds)")
    
    @property
    def lifetime(self) -> int:
        """Seconds between issue and expiry."""
        return self.exp - self.iat
