"""
Typed asyncio client for the PlanetScale API.

Example:
    from pscale_client import PlanetScaleClient
    from pscale_client.operations import list_databases

    async with PlanetScaleClient() as client:
        async for db in client.items(list_databases, {"organization": "acme"}):
            print(db.name)
"""

from loguru import logger

from .client import PlanetScaleClient
from .credentials import Credentials
from .logging import disable_logging, setup_logging

# Silent until the application calls setup_logging
logger.disable(__name__)

__all__ = ["Credentials", "PlanetScaleClient", "disable_logging", "setup_logging"]
