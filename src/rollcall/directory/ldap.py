"""
LDAP / Active Directory backend.

Translates DirectoryFilter queries into LDAP search filters and maps
ldap3 failures onto the Rollcall error taxonomy:
  socket / bind / session failures -> DirectoryUnavailable
  everything else                  -> DirectoryQueryError

Requirements:
    pip install ldap3
"""

from __future__ import annotations

from typing import Any, List
import logging

import ldap3
from ldap3 import Connection, Server, SUBTREE
from ldap3.core.exceptions import (
    LDAPBindError,
    LDAPCommunicationError,
    LDAPException,
)
from ldap3.utils.conv import escape_filter_chars

from rollcall.config import LdapSettings
from rollcall.directory.base import DirectoryFilter, DirectoryRecord, NamePattern
from rollcall.errors import DirectoryQueryError, DirectoryUnavailable

logger = logging.getLogger(__name__)

RESULT_SUCCESS = 0
RESULT_SIZE_LIMIT_EXCEEDED = 4


def pattern_to_ldap(attribute: str, pattern: NamePattern) -> str:
    """Render one attribute assertion, e.g. (sn=Smith) or (givenName=J*)."""
    value = escape_filter_chars(pattern.value)
    if pattern.prefix:
        value += "*"
    return f"({attribute}={value})"


def build_search_filter(query: DirectoryFilter, settings: LdapSettings) -> str:
    """Build the full LDAP filter for a surname + given-name query."""
    return (
        f"(&{settings.object_filter}"
        f"{pattern_to_ldap(settings.surname_attribute, query.surname)}"
        f"{pattern_to_ldap(settings.given_name_attribute, query.given_name)})"
    )


def _first_value(value: Any) -> str:
    """Flatten a (possibly multi-valued) attribute to a single string."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else ""
    return str(value)


class LdapDirectory:
    """
    DirectoryClient over an ldap3 connection.

    The connection is owned by whoever created it; use connect() to open
    a bound connection from settings and close() (or a with-block) to
    release it.

    Example:
        >>> with LdapDirectory.connect(LdapSettings.from_env()) as directory:
        ...     resolver = IdentityResolver(directory)
        ...     results = resolver.resolve("Smith, John")
    """

    def __init__(self, connection: Connection, settings: LdapSettings):
        self.connection = connection
        self.settings = settings

    @classmethod
    def connect(cls, settings: LdapSettings) -> "LdapDirectory":
        """Open and bind a read-only connection to the directory."""
        logger.info(f"Connecting to {settings.url}...")
        try:
            server = Server(
                settings.host,
                port=settings.port,
                use_ssl=settings.use_ssl,
                get_info=ldap3.NONE,
                connect_timeout=settings.timeout,
            )
            connection = Connection(
                server,
                user=settings.bind_user,
                password=settings.bind_password,
                auto_bind=True,
                read_only=True,
                receive_timeout=settings.timeout,
            )
        except LDAPCommunicationError as e:
            raise DirectoryUnavailable(f"Cannot reach directory at {settings.url}: {e}") from e
        except LDAPBindError as e:
            raise DirectoryUnavailable(f"Bind to {settings.url} failed: {e}") from e
        except LDAPException as e:
            raise DirectoryUnavailable(f"Cannot open directory session at {settings.url}: {e}") from e

        logger.info(f"Connected to {settings.url} (base DN: {settings.base_dn or '<none>'})")
        return cls(connection, settings)

    @property
    def attributes(self) -> List[str]:
        s = self.settings
        return [
            s.account_attribute,
            s.given_name_attribute,
            s.initials_attribute,
            s.surname_attribute,
            s.description_attribute,
            s.mail_attribute,
        ]

    def find_users(self, query: DirectoryFilter) -> List[DirectoryRecord]:
        """Search the directory for users matching both name patterns."""
        search_filter = build_search_filter(query, self.settings)
        logger.debug(f"LDAP search base={self.settings.base_dn!r} filter={search_filter}")

        try:
            self.connection.search(
                search_base=self.settings.base_dn,
                search_filter=search_filter,
                search_scope=SUBTREE,
                attributes=self.attributes,
                size_limit=self.settings.size_limit,
            )
        except LDAPCommunicationError as e:
            raise DirectoryUnavailable(f"Directory connection lost: {e}") from e
        except LDAPException as e:
            raise DirectoryQueryError(f"LDAP search failed: {e}", query=search_filter) from e

        result = self.connection.result or {}
        code = result.get("result", RESULT_SUCCESS)
        if code == RESULT_SIZE_LIMIT_EXCEEDED:
            logger.warning(f"Size limit exceeded for {search_filter}; results are partial")
        elif code != RESULT_SUCCESS:
            raise DirectoryQueryError(
                f"LDAP search returned {result.get('description', code)} ({code})",
                query=search_filter,
            )

        return [
            self._to_record(entry["attributes"])
            for entry in (self.connection.response or [])
            if entry.get("type") == "searchResEntry"
        ]

    def _to_record(self, attributes: dict) -> DirectoryRecord:
        s = self.settings
        return DirectoryRecord(
            account_name=_first_value(attributes.get(s.account_attribute)),
            given_name=_first_value(attributes.get(s.given_name_attribute)),
            initials=_first_value(attributes.get(s.initials_attribute)),
            surname=_first_value(attributes.get(s.surname_attribute)),
            description=_first_value(attributes.get(s.description_attribute)),
            mail=_first_value(attributes.get(s.mail_attribute)),
        )

    def close(self) -> None:
        """Unbind the connection."""
        try:
            self.connection.unbind()
        except LDAPException as e:
            logger.debug(f"Unbind failed: {e}")

    def __enter__(self) -> "LdapDirectory":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
