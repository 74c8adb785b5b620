"""
Scheduler package for the Electricity Price API.
Contains the periodic dataset reload task.
"""

from .reloader import DatasetReloader

__all__ = [
    "DatasetReloader",
]
