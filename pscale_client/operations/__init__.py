"""
Operation descriptors for PlanetScale API endpoints.
"""

from .databases import create_database, delete_database, get_database, list_databases
from .models import Database, Organization, Region, ServiceToken
from .organizations import get_organization, list_organizations
from .service_tokens import create_service_token, list_service_tokens

__all__ = [
    "Database",
    "Organization",
    "Region",
    "ServiceToken",
    "create_database",
    "create_service_token",
    "delete_database",
    "get_database",
    "get_organization",
    "list_databases",
    "list_organizations",
    "list_service_tokens",
]
