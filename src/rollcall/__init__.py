"""
Rollcall - Directory identity resolution for free-text names

Turns "Smith, John E." or "John Smith" into directory account
candidates using a confidence-tiered matching cascade.

Modules:
- names: Name parsing and casing policies
- directory: Directory interface and LDAP / CSV backends
- identity: Tiered identity resolution (Exact -> LastName -> FirstName)
- api: HTTP API (FastAPI)
- cli: Command-line interface
"""

__version__ = "0.2.0"
__author__ = "Rollcall Development Team"

# Re-export key classes for convenience
from rollcall.errors import (
    RollcallError,
    ConfigurationError,
    ParseError,
    ResolutionError,
    DirectoryError,
    DirectoryUnavailable,
    DirectoryQueryError,
)
from rollcall.names import (
    CasingPolicy,
    NameParser,
    ParsedName,
    parse_name,
)
from rollcall.directory import (
    DirectoryClient,
    DirectoryFilter,
    DirectoryRecord,
    NamePattern,
    DataFrameDirectory,
    LdapDirectory,
    build_directory,
)
from rollcall.identity import (
    IdentityResolver,
    MatchResult,
    MatchTier,
    Resolution,
    resolve_identity,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "RollcallError",
    "ConfigurationError",
    "ParseError",
    "ResolutionError",
    "DirectoryError",
    "DirectoryUnavailable",
    "DirectoryQueryError",
    # Names
    "CasingPolicy",
    "NameParser",
    "ParsedName",
    "parse_name",
    # Directory
    "DirectoryClient",
    "DirectoryFilter",
    "DirectoryRecord",
    "NamePattern",
    "DataFrameDirectory",
    "LdapDirectory",
    "build_directory",
    # Identity
    "IdentityResolver",
    "MatchResult",
    "MatchTier",
    "Resolution",
    "resolve_identity",
]
