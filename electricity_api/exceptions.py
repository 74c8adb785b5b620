"""
Domain exceptions for the Electricity Price API.
Provides clear, typed exceptions for business logic errors.

Every exception carries the HTTP status and the machine readable code used
when it is rendered at the API boundary.
"""


class PriceAPIException(Exception):
    """Base exception for all Electricity Price API errors."""
    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"
    
    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class ConfigurationError(PriceAPIException):
    """Raised at startup when required configuration is missing."""
    code = "CONFIGURATION_ERROR"
    default_message = "Invalid configuration"


class CredentialsMissingError(PriceAPIException):
    """Raised when a login request lacks a username or password."""
    status_code = 400
    code = "CREDENTIALS_MISSING"
    default_message = "Username and password are required"


class InvalidCredentialsError(PriceAPIException):
    """Raised when the username is unknown or the password does not match."""
    status_code = 401
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class AuthHeaderMissingError(PriceAPIException):
    """Raised when a protected request has no usable bearer header."""
    status_code = 401
    code = "AUTH_HEADER_MISSING"
    default_message = "Access token required"


class InvalidTokenError(PriceAPIException):
    """Raised when a bearer token is malformed, forged or expired."""
    status_code = 401
    code = "INVALID_TOKEN"
    default_message = "Invalid token"


class DatasetError(PriceAPIException):
    """Base class for dataset loading failures."""
    code = "DATASET_UNAVAILABLE"
    default_message = "Failed to load price data"


class DatasetNotFoundError(DatasetError):
    """Raised when the dataset file does not exist."""
    code = "DATASET_NOT_FOUND"
    default_message = "Failed to load price data: file not found"


class DatasetMalformedError(DatasetError):
    """Raised when any row of the dataset fails parsing or validation."""
    code = "DATASET_MALFORMED"
    default_message = "Failed to parse price data"


class DatasetLoadError(DatasetError):
    """Raised on I/O failures other than a missing file."""
    pass


class RegionQueryMissingError(PriceAPIException):
    """Raised when a price query has no state parameter."""
    status_code = 400
    code = "STATE_REQUIRED"
    default_message = "State query parameter is required"


class RegionNotFoundError(PriceAPIException):
    """Raised when the requested state has no records."""
    status_code = 404
    code = "STATE_NOT_FOUND"
    default_message = "No data found for state"


class InvalidRequestError(PriceAPIException):
    """Raised when request parameters fail schema validation."""
    status_code = 422
    code = "INVALID_REQUEST"
    default_message = "Invalid request"


class InternalServerError(PriceAPIException):
    """Raised for unexpected failures; the message never leaks internals."""
    pass
