"""
Identity Resolver - Map free-text names to directory accounts.

This module runs the matching cascade:
  Exact     (surname == last, givenName == first)
  LastName  (surname == last, givenName == first initial*)
  FirstName (surname == last initial*, givenName == first)

The cascade stops at the first tier that returns any record. Every
record at that tier is returned, tagged with the tier and the number of
candidates found there; ambiguity is reported, never resolved.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union
import logging

from rollcall.directory.base import DirectoryClient, DirectoryFilter, DirectoryRecord, NamePattern
from rollcall.errors import ConfigurationError, ParseError
from rollcall.names import CaseStrategy, CasingPolicy, NameParser, ParsedName

logger = logging.getLogger(__name__)

NO_MATCH_NOTE = "no match found"

# A resolver accepts either a raw string or an already-parsed name
NameInput = Union[str, ParsedName]


class MatchTier(IntEnum):
    """Match confidence, highest first."""
    NONE = 0
    FIRST_NAME = 1
    LAST_NAME = 2
    EXACT = 3

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]

    @classmethod
    def parse(cls, value: Union[str, "MatchTier", None]) -> Optional["MatchTier"]:
        """Accept "Exact", "LastName", "last_name", "EXACT"... None passes through."""
        if value is None or isinstance(value, cls):
            return value
        key = value.strip().replace("_", "").replace("-", "").lower()
        for tier in cls:
            if key in (tier.label.lower(), tier.name.replace("_", "").lower()):
                return tier
        raise ConfigurationError(
            f"Unknown match tier {value!r} (expected one of: {', '.join(t.label for t in cls)})"
        )


_TIER_LABELS = {
    MatchTier.EXACT: "Exact",
    MatchTier.LAST_NAME: "LastName",
    MatchTier.FIRST_NAME: "FirstName",
    MatchTier.NONE: "None",
}


# Tier -> query, in cascade order
CASCADE: Tuple[Tuple[MatchTier, Callable[[ParsedName], DirectoryFilter]], ...] = (
    (MatchTier.EXACT, lambda n: DirectoryFilter(
        surname=NamePattern.exact(n.last_name),
        given_name=NamePattern.exact(n.first_name),
    )),
    (MatchTier.LAST_NAME, lambda n: DirectoryFilter(
        surname=NamePattern.exact(n.last_name),
        given_name=NamePattern.starts_with(n.first_initial),
    )),
    (MatchTier.FIRST_NAME, lambda n: DirectoryFilter(
        surname=NamePattern.starts_with(n.last_initial),
        given_name=NamePattern.exact(n.first_name),
    )),
)


@dataclass(frozen=True)
class MatchResult:
    """One directory account found for a name, with match provenance."""
    account_name: str
    given_name: str
    initials: str
    surname: str
    description: str
    mail: str
    match_tier: MatchTier
    match_count: int

    @classmethod
    def from_record(cls, record: DirectoryRecord, tier: MatchTier, count: int) -> "MatchResult":
        return cls(
            account_name=record.account_name,
            given_name=record.given_name,
            initials=record.initials,
            surname=record.surname,
            description=record.description,
            mail=record.mail,
            match_tier=tier,
            match_count=count,
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "account_name": self.account_name,
            "given_name": self.given_name,
            "initials": self.initials,
            "surname": self.surname,
            "description": self.description,
            "mail": self.mail,
            "match_tier": self.match_tier.label,
            "match_count": self.match_count,
        }


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of one cascade run.

    Distinguishes the three caller-visible outcomes: no candidates
    (tier NONE), a single candidate, and multiple candidates at one tier.
    """
    name: ParsedName
    tier: MatchTier = MatchTier.NONE
    results: Tuple[MatchResult, ...] = ()
    queried_tiers: Tuple[MatchTier, ...] = field(default_factory=tuple)

    @property
    def match_count(self) -> int:
        return len(self.results)

    @property
    def is_match(self) -> bool:
        """Check if any candidate was found."""
        return self.tier is not MatchTier.NONE

    @property
    def is_ambiguous(self) -> bool:
        """Check if more than one candidate was found at the stopping tier."""
        return self.match_count > 1

    @property
    def note(self) -> str:
        if not self.is_match:
            return NO_MATCH_NOTE
        if self.is_ambiguous:
            return f"{self.match_count} candidates found at tier {self.tier.label}"
        return f"1 candidate found at tier {self.tier.label}"

    def filtered(self, tier: Optional[MatchTier] = None) -> List[MatchResult]:
        """Results, optionally limited to those found at exactly `tier`."""
        if tier is None:
            return list(self.results)
        return [r for r in self.results if r.match_tier == tier]

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "parsed": self.name.to_dict(),
            "tier": self.tier.label,
            "match_count": self.match_count,
            "note": self.note,
            "queried_tiers": [t.label for t in self.queried_tiers],
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class BatchItem:
    """One entry of a batch resolution; either resolution or error is set."""
    input: str
    resolution: Optional[Resolution] = None
    error: Optional[ParseError] = None
    tier_filter: Optional[MatchTier] = None

    def results(self, tier: Optional[MatchTier] = None) -> List[MatchResult]:
        """Results limited to `tier`, or to the batch tier filter when omitted."""
        if not self.resolution:
            return []
        return self.resolution.filtered(tier if tier is not None else self.tier_filter)


class IdentityResolver:
    """
    Resolve names to directory accounts with a tiered cascade.

    Each call issues at most three sequential directory queries and
    builds a fresh result list; the resolver holds no per-call state.
    Directory errors propagate unchanged and stop the cascade.

    Example:
        >>> resolver = IdentityResolver(directory)
        >>> for match in resolver.resolve("Smith, John E."):
        ...     print(match.account_name, match.match_tier.label, match.match_count)
    """

    def __init__(
        self,
        directory: DirectoryClient,
        casing: CasingPolicy = CasingPolicy.NONE,
        strategy: Optional[CaseStrategy] = None,
    ):
        """
        Initialize the resolver.

        Args:
            directory: Backend implementing find_users()
            casing: Casing applied when parsing raw string input
            strategy: Optional locale case strategy for the parser
        """
        self.directory = directory
        self.parser = NameParser(casing, strategy)

    def to_parsed(self, name: NameInput) -> ParsedName:
        """Resolve the str | ParsedName input into a ParsedName."""
        if isinstance(name, ParsedName):
            return name
        if isinstance(name, str):
            return self.parser.parse(name)
        raise TypeError(f"Expected str or ParsedName, got {type(name).__name__}")

    def resolve_detailed(self, name: NameInput) -> Resolution:
        """
        Run the cascade for one name.

        Args:
            name: Raw name string or ParsedName

        Returns:
            Resolution with the stopping tier and all candidates found there

        Raises:
            ParseError: raw string input could not be parsed
            DirectoryUnavailable / DirectoryQueryError: from the directory
        """
        parsed = self.to_parsed(name)
        queried: List[MatchTier] = []

        for tier, build_query in CASCADE:
            query = build_query(parsed)
            queried.append(tier)
            logger.debug(f"[{parsed}] tier {tier.label}: {query}")

            records = self.directory.find_users(query)
            if records:
                count = len(records)
                results = tuple(MatchResult.from_record(r, tier, count) for r in records)
                resolution = Resolution(parsed, tier, results, tuple(queried))
                logger.info(f"[{parsed}] {resolution.note}")
                return resolution

        resolution = Resolution(parsed, MatchTier.NONE, (), tuple(queried))
        logger.info(f"[{parsed}] {NO_MATCH_NOTE}")
        return resolution

    def resolve(self, name: NameInput, tier_filter: Optional[MatchTier] = None) -> List[MatchResult]:
        """
        Resolve a name to match results.

        Args:
            name: Raw name string or ParsedName
            tier_filter: Only return results found at exactly this tier

        Returns:
            List of MatchResult (empty when nothing matched or the
            filter excludes the stopping tier)
        """
        return self.resolve_detailed(name).filtered(tier_filter)

    def resolve_many(
        self,
        names: Iterable[NameInput],
        tier_filter: Optional[MatchTier] = None,
        max_workers: int = 1,
    ) -> List[BatchItem]:
        """
        Resolve a batch of names, preserving input order.

        tier_filter is recorded on every BatchItem and applied by
        BatchItem.results(); each full Resolution is kept as found.

        A name that fails to parse is reported on its BatchItem; directory
        errors abort the whole batch. With max_workers > 1 the names are
        resolved on a thread pool, which requires a thread-safe directory.
        """
        names = list(names)
        logger.info(f"Resolving {len(names)} names (workers={max_workers})")

        if max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                items = list(executor.map(lambda n: self._resolve_item(n, tier_filter), names))
        else:
            items = [self._resolve_item(n, tier_filter) for n in names]

        matched = sum(1 for i in items if i.resolution and i.resolution.is_match)
        ambiguous = sum(1 for i in items if i.resolution and i.resolution.is_ambiguous)
        failed = sum(1 for i in items if i.error)
        logger.info(
            f"Resolved {len(items)} names: {matched} matched, "
            f"{ambiguous} ambiguous, {failed} unparseable"
        )
        return items

    def _resolve_item(self, name: NameInput, tier_filter: Optional[MatchTier] = None) -> BatchItem:
        label = name.full_name if isinstance(name, ParsedName) else name
        try:
            return BatchItem(label, resolution=self.resolve_detailed(name), tier_filter=tier_filter)
        except ParseError as e:
            logger.warning(str(e))
            return BatchItem(label, error=e, tier_filter=tier_filter)


def resolve_identity(
    name: NameInput,
    directory: DirectoryClient,
    tier_filter: Optional[MatchTier] = None,
    casing: CasingPolicy = CasingPolicy.NONE,
) -> List[MatchResult]:
    """
    Convenience function to resolve one name against a directory.

    Args:
        name: Raw name string or ParsedName
        directory: DirectoryClient backend
        tier_filter: Only return results found at exactly this tier
        casing: Casing applied if `name` is a raw string

    Returns:
        List of MatchResult
    """
    return IdentityResolver(directory, casing).resolve(name, tier_filter)
