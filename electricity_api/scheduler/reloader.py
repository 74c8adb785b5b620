"""
Periodic dataset reloader running as an asyncio background task.
Keeps the last good snapshot live when a reload fails.
"""

import asyncio
from datetime import datetime
from typing import Optional

from electricity_api.exceptions import DatasetError
from electricity_api.logging_config import get_logger
from electricity_api.services.data_service import PriceDataService

logger = get_logger(__name__)


class DatasetReloader:
    """Background task that reloads the price dataset on a fixed interval."""
    
    def __init__(self, data_service: PriceDataService, interval_seconds: float):
        self.data_service = data_service
        self.interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None
    
    async def start(self) -> None:
        """Start the reload background task."""
        if self._running:
            logger.warning("Reloader already running")
            return
        
        if self.interval_seconds <= 0:
            logger.info("Periodic dataset reload disabled")
            return
        
        self._running = True
        self._task = asyncio.create_task(self._reload_loop())
        logger.info("Reloader started", interval_seconds=self.interval_seconds)
    
    async def stop(self) -> None:
        """Stop the reloader."""
        if not self._running:
            return
        
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        
        logger.info("Reloader stopped")
    
    async def _reload_loop(self) -> None:
        """Main reload loop."""
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)
                
                if not self._running:
                    break
                
                await self.reload_once()
                
            except asyncio.CancelledError:
                break
    
    async def reload_once(self) -> bool:
        """
        Reload the dataset a single time.
        
        Returns:
            True if the new snapshot was swapped in, False if the previous one was kept
        """
        job_start = datetime.now()
        
        try:
            snapshot = await self.data_service.load()
        except DatasetError as e:
            logger.error(
                "Scheduled dataset reload failed, keeping previous snapshot",
                error=str(e),
                duration_seconds=(datetime.now() - job_start).total_seconds(),
            )
            return False
        
        logger.info(
            "Completed scheduled dataset reload",
            records=len(snapshot.records),
            duration_seconds=(datetime.now() - job_start).total_seconds(),
        )
        return True
    
    @property
    def is_running(self) -> bool:
        """Check if reloader is running."""
        return self._running
