"""
Directory interface consumed by the identity resolver.

Backends implement DirectoryClient.find_users(); the resolver never
talks to LDAP (or anything else) directly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Protocol, Sequence


@dataclass(frozen=True)
class NamePattern:
    """A name attribute constraint: exact value, or prefix match ("value*")."""
    value: str
    prefix: bool = False

    @classmethod
    def exact(cls, value: str) -> "NamePattern":
        return cls(value, prefix=False)

    @classmethod
    def starts_with(cls, value: str) -> "NamePattern":
        return cls(value, prefix=True)

    def matches(self, candidate: str, case_sensitive: bool = False) -> bool:
        """Evaluate the pattern locally (used by in-memory backends)."""
        value, candidate = self.value, candidate or ""
        if not case_sensitive:
            value, candidate = value.casefold(), candidate.casefold()
        if self.prefix:
            return candidate.startswith(value)
        return candidate == value

    def __str__(self) -> str:
        return f"{self.value}*" if self.prefix else self.value


@dataclass(frozen=True)
class DirectoryFilter:
    """Surname + given-name query sent to the directory."""
    surname: NamePattern
    given_name: NamePattern

    def __str__(self) -> str:
        return f"surname={self.surname} givenName={self.given_name}"


@dataclass(frozen=True)
class DirectoryRecord:
    """User record fields the resolver passes through to match results."""
    account_name: str
    given_name: str = ""
    initials: str = ""
    surname: str = ""
    description: str = ""
    mail: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DirectoryRecord":
        """Build a record from a dict, ignoring unknown keys and mapping None to ""."""
        return cls(**{
            name: "" if data.get(name) is None else str(data.get(name))
            for name in cls.__dataclass_fields__
        })

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return asdict(self)


class DirectoryClient(Protocol):
    """Protocol for directory backends."""

    def find_users(self, query: DirectoryFilter) -> Sequence[DirectoryRecord]:
        """
        Return all user records matching both name patterns.

        Raises:
            DirectoryUnavailable: transport/authentication failure
            DirectoryQueryError: the query itself failed
        """
        ...
