#!/usr/bin/env python3
"""
Development helper scripts for the Electricity Price API.
Provides utilities for inspecting configuration, data and tokens.
"""

import asyncio
import sys

from electricity_api.config import settings
from electricity_api.exceptions import PriceAPIException
from electricity_api.logging_config import setup_logging
from electricity_api.services.auth_service import AuthService
from electricity_api.services.data_service import PriceDataService


async def show_prices():
    """Display the mean price and record count for every state."""
    print(f"Loading price data from {settings.csv_data_path}...")
    setup_logging()
    
    data_service = PriceDataService.from_settings(settings)
    await data_service.load()
    
    regions = data_service.get_distinct_regions()
    if not regions:
        print("No price data found in dataset")
        return
    
    print(f"\nFound {data_service.record_count} records across {len(regions)} states:")
    print("-" * 40)
    print(f"{'State':<12} {'Mean Price':>12} {'Records':>10}")
    print("-" * 40)
    
    for region in regions:
        summary = data_service.get_region_summary(region)
        print(f"{region:<12} {summary.mean_price:>12.2f} {summary.record_count:>10}")


async def check_data():
    """Validate the dataset without starting the server."""
    print("Validating price data...")
    setup_logging()
    
    try:
        data_service = PriceDataService.from_settings(settings)
        snapshot = await data_service.load()
        print(f"Dataset OK: {len(snapshot.records)} records, {len(snapshot.regions)} states")
    except PriceAPIException as e:
        print(f"Dataset check failed [{e.code}]: {e}")


def issue_token(username: str):
    """Print a bearer token for a configured user (no password check)."""
    auth_service = AuthService.from_settings(settings)
    result = auth_service.issue_token(username)
    print(f"Token for {username} (expires in {result.expires_in}s):")
    print(result.token)


def show_config():
    """Display current configuration settings."""
    print("Current Configuration:")
    print("-" * 40)
    print(f"API Host: {settings.api_host}")
    print(f"API Port: {settings.api_port}")
    print(f"Debug Mode: {settings.api_debug}")
    print(f"CSV Data Path: {settings.csv_data_path}")
    print(f"Reload Interval: {settings.data_reload_interval_seconds}s")
    print(f"JWT Secret Set: {bool(settings.jwt_secret)}")
    print(f"Multi-user Config: {bool(settings.api_users)}")
    print(f"Legacy User: {settings.api_username}")
    print(f"Log Level: {settings.log_level}")


def main():
    """Main script entry point with command selection."""
    if len(sys.argv) < 2:
        print("Electricity Price API Development Scripts")
        print("Usage: python scripts/dev.py <command>")
        print("\nAvailable commands:")
        print("  show-config           - Display current configuration")
        print("  show-prices           - Display mean price per state")
        print("  check-data            - Validate the CSV dataset")
        print("  issue-token <user>    - Print a bearer token for a user")
        return
    
    command = sys.argv[1]
    
    if command == "show-config":
        show_config()
    elif command == "show-prices":
        asyncio.run(show_prices())
    elif command == "check-data":
        asyncio.run(check_data())
    elif command == "issue-token":
        if len(sys.argv) < 3:
            print("Usage: python scripts/dev.py issue-token <username>")
            return
        issue_token(sys.argv[2])
    else:
        print(f"Unknown command: {command}")
        print("Run without arguments to see available commands")


if __name__ == "__main__":
    main()
