"""
Application configuration management using Pydantic Settings.
Handles environment variables and default values for the service.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    
    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8080, description="API port")
    api_debug: bool = Field(default=False, description="Enable debug mode")
    api_reload: bool = Field(default=False, description="Enable auto-reload")
    
    # Authentication Configuration
    jwt_secret: Optional[str] = Field(
        default=None,
        description="Secret used to sign bearer tokens (required)"
    )
    api_users: Optional[str] = Field(
        default=None,
        description="Comma separated 'username:password' pairs"
    )
    api_username: Optional[str] = Field(
        default=None,
        description="Legacy single user name, used when API_USERS is empty"
    )
    api_password: Optional[str] = Field(
        default=None,
        description="Legacy single user password"
    )
    
    # Dataset Configuration
    csv_data_path: Optional[str] = Field(
        default=None,
        description="Path to the CSV file with state,price,timestamp rows"
    )
    data_reload_interval_seconds: int = Field(
        default=0,
        ge=0,
        description="Reload the dataset every N seconds (0 disables)"
    )
    
    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json/text)")
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
