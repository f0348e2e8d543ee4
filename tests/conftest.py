"""
Shared fixtures for Rollcall tests.
"""

from typing import Dict, List, Optional

import pytest

from rollcall.directory import DirectoryFilter, DirectoryRecord
from rollcall.identity import MatchTier


def tier_of(query: DirectoryFilter) -> MatchTier:
    """Which cascade tier produced a query, from its pattern shape."""
    if not query.surname.prefix and not query.given_name.prefix:
        return MatchTier.EXACT
    if not query.surname.prefix:
        return MatchTier.LAST_NAME
    return MatchTier.FIRST_NAME


class StubDirectory:
    """
    Directory double returning canned records per tier.

    Records every query so tests can assert which tiers were asked.
    """

    def __init__(
        self,
        responses: Optional[Dict[MatchTier, List[DirectoryRecord]]] = None,
        errors: Optional[Dict[MatchTier, Exception]] = None,
    ):
        self.responses = responses or {}
        self.errors = errors or {}
        self.queries: List[DirectoryFilter] = []

    @property
    def queried_tiers(self) -> List[MatchTier]:
        return [tier_of(q) for q in self.queries]

    def find_users(self, query: DirectoryFilter) -> List[DirectoryRecord]:
        self.queries.append(query)
        tier = tier_of(query)
        if tier in self.errors:
            raise self.errors[tier]
        return list(self.responses.get(tier, []))


def make_record(account: str, given: str, surname: str, **kwargs) -> DirectoryRecord:
    return DirectoryRecord(
        account_name=account,
        given_name=given,
        surname=surname,
        initials=kwargs.get("initials", ""),
        description=kwargs.get("description", ""),
        mail=kwargs.get("mail", f"{account}@example.com"),
    )


@pytest.fixture
def john_smith() -> DirectoryRecord:
    return make_record("jsmith", "John", "Smith", initials="E", description="Engineering")


@pytest.fixture
def sample_records() -> List[DirectoryRecord]:
    """A small directory with one exact match and several near misses."""
    return [
        make_record("jsmith", "John", "Smith", initials="E", description="Engineering"),
        make_record("jasmith", "Jane", "Smith", initials="A", description="Finance"),
        make_record("jsmythe", "John", "Smythe", description="Sales"),
        make_record("mgarcia", "Maria", "Garcia", initials="L", description="HR"),
        make_record("mobrien", "Michael", "O'Brien", description="IT"),
    ]
