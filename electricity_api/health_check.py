"""
Health check module for Docker health checks and monitoring.
Verifies that configuration is complete and the dataset loads.
"""

import asyncio
import sys

from electricity_api.config import settings
from electricity_api.exceptions import PriceAPIException
from electricity_api.logging_config import get_logger, setup_logging
from electricity_api.services.auth_service import AuthService
from electricity_api.services.data_service import PriceDataService

logger = get_logger(__name__)


async def health_check() -> bool:
    """
    Perform comprehensive health check of the service.
    """
    try:
        AuthService.from_settings(settings)
        
        data_service = PriceDataService.from_settings(settings)
        snapshot = await data_service.load()
        
        logger.info("Dataset check passed", records=len(snapshot.records), states=len(snapshot.regions))
        return True
        
    except PriceAPIException as e:
        logger.error("Health check failed", error=str(e), code=e.code)
        return False


async def main():
    """
    Main health check entry point for command line usage.
    """
    setup_logging()
    is_healthy = await health_check()
    
    if is_healthy:
        logger.info("Health check passed")
        sys.exit(0)
    else:
        logger.error("Health check failed")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
