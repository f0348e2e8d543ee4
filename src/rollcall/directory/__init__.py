"""
Rollcall Directory Module

Abstract directory interface plus the bundled backends.

Key components:
- DirectoryClient: protocol the identity resolver queries
- DirectoryFilter / NamePattern: surname + given-name query
- DirectoryRecord: user record returned by a backend
- LdapDirectory: LDAP / Active Directory backend (ldap3)
- DataFrameDirectory: in-memory backend over a CSV export (pandas)
"""

from rollcall.config import RollcallConfig
from rollcall.directory.base import (
    DirectoryClient,
    DirectoryFilter,
    DirectoryRecord,
    NamePattern,
)
from rollcall.directory.frame import DataFrameDirectory
from rollcall.directory.ldap import LdapDirectory, build_search_filter
from rollcall.errors import ConfigurationError

BACKENDS = ("csv", "ldap")


def build_directory(config: RollcallConfig) -> DirectoryClient:
    """
    Create the directory backend selected by configuration.

    Args:
        config: RollcallConfig (backend, csv_path, ldap settings)

    Returns:
        A connected DirectoryClient
    """
    if config.backend == "csv":
        return DataFrameDirectory.from_csv(config.csv_path)
    if config.backend == "ldap":
        return LdapDirectory.connect(config.ldap)
    raise ConfigurationError(
        f"Unknown directory backend {config.backend!r} (expected one of: {', '.join(BACKENDS)})"
    )


__all__ = [
    "BACKENDS",
    "DirectoryClient",
    "DirectoryFilter",
    "DirectoryRecord",
    "NamePattern",
    "DataFrameDirectory",
    "LdapDirectory",
    "build_search_filter",
    "build_directory",
]
