"""
Rollcall Configuration Management

Centralized configuration for the directory backend, name casing and
the API server.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import os


# Project root (src/rollcall/config.py -> project root is 3 levels up).
# Only meaningful in a source checkout; an installed package has no data/
# directory, so set ROLLCALL_CSV_PATH for the csv backend there.
PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_USERS_CSV = DATA_DIR / "directory_users.csv"


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").lower() in ("1", "true", "yes")


@dataclass
class LdapSettings:
    """LDAP / Active Directory connection settings."""

    host: str = "localhost"
    port: Optional[int] = None  # None -> 389, or 636 with SSL
    use_ssl: bool = False
    bind_user: Optional[str] = None
    bind_password: Optional[str] = None
    base_dn: str = ""
    timeout: int = 10            # Connect and receive timeout, seconds
    size_limit: int = 0          # 0 -> server default

    # Attribute names on the user object (AD defaults)
    account_attribute: str = "sAMAccountName"
    given_name_attribute: str = "givenName"
    initials_attribute: str = "initials"
    surname_attribute: str = "sn"
    description_attribute: str = "description"
    mail_attribute: str = "mail"
    object_filter: str = "(objectCategory=person)(objectClass=user)"

    @property
    def url(self) -> str:
        scheme = "ldaps" if self.use_ssl else "ldap"
        port = self.port or (636 if self.use_ssl else 389)
        return f"{scheme}://{self.host}:{port}"

    @classmethod
    def from_env(cls) -> "LdapSettings":
        """Create LdapSettings from environment variables."""
        port = os.getenv("ROLLCALL_LDAP_PORT")
        return cls(
            host=os.getenv("ROLLCALL_LDAP_HOST", "localhost"),
            port=int(port) if port else None,
            use_ssl=_env_bool("ROLLCALL_LDAP_USE_SSL", False),
            bind_user=os.getenv("ROLLCALL_LDAP_BIND_USER"),
            bind_password=os.getenv("ROLLCALL_LDAP_BIND_PASSWORD"),
            base_dn=os.getenv("ROLLCALL_LDAP_BASE_DN", ""),
            timeout=int(os.getenv("ROLLCALL_LDAP_TIMEOUT", "10")),
            size_limit=int(os.getenv("ROLLCALL_LDAP_SIZE_LIMIT", "0")),
        )


@dataclass
class RollcallConfig:
    """Main configuration for Rollcall."""

    # Directory backend: "csv" (offline export) or "ldap"
    backend: str = "csv"
    csv_path: Path = DEFAULT_USERS_CSV
    ldap: LdapSettings = field(default_factory=LdapSettings)

    # Name parsing
    casing: str = "none"
    locale: Optional[str] = None

    # API settings
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "RollcallConfig":
        """Create config from environment variables."""
        config = cls(ldap=LdapSettings.from_env())

        if backend := os.environ.get("ROLLCALL_BACKEND"):
            config.backend = backend.lower()
        if csv_path := os.environ.get("ROLLCALL_CSV_PATH"):
            config.csv_path = Path(csv_path)
        if casing := os.environ.get("ROLLCALL_CASING"):
            config.casing = casing
        if locale := os.environ.get("ROLLCALL_LOCALE"):
            config.locale = locale
        if api_host := os.environ.get("ROLLCALL_API_HOST"):
            config.api_host = api_host
        if api_port := os.environ.get("ROLLCALL_API_PORT"):
            config.api_port = int(api_port)
        if log_level := os.environ.get("ROLLCALL_LOG_LEVEL"):
            config.log_level = log_level.upper()

        return config


# Default config instance
config = RollcallConfig.from_env()
