"""
Name Parser - Split free-text personal names into structured fields.

Two input shapes are recognised:
  "Last, First [Middle]"   (comma form; "Last,First" also accepted)
  "First [Middle] Last"    (space form)

Titles, suffixes and multi-word surnames are not supported. In the space
form anything after the third token is dropped.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Optional
import logging

from rollcall.errors import ParseError
from rollcall.names.casing import CaseStrategy, CasingPolicy, DefaultCaseStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedName:
    """
    Structured, case-normalized name.

    first_initial / last_initial are upper-case; middle_initial is
    lower-case (kept that way for compatibility with existing consumers).
    Initials left empty are derived from the names; an initial without
    its name is rejected.
    """
    first_name: str
    last_name: str
    middle_name: str = ""
    first_initial: str = ""
    middle_initial: str = ""
    last_initial: str = ""

    def __post_init__(self):
        for name_field, initial_field, case in (
            ("first_name", "first_initial", str.upper),
            ("middle_name", "middle_initial", str.lower),
            ("last_name", "last_initial", str.upper),
        ):
            name = getattr(self, name_field)
            initial = getattr(self, initial_field)
            if name and not initial:
                object.__setattr__(self, initial_field, case(name[0]))
            elif initial and not name:
                raise ValueError(f"{initial_field} {initial!r} given without {name_field}")

    @property
    def full_name(self) -> str:
        """Canonical "First Middle Last" rendering."""
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)

    @property
    def sort_name(self) -> str:
        """Directory-style "Last, First Middle" rendering."""
        given = " ".join(p for p in (self.first_name, self.middle_name) if p)
        return f"{self.last_name}, {given}"

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return asdict(self)

    def __str__(self) -> str:
        return self.full_name


def _strip_period(token: str) -> str:
    return token.rstrip(".")


def _usable_tokens(text: str) -> List[str]:
    """Whitespace tokens, ignoring tokens made only of periods."""
    return [t for t in text.split() if _strip_period(t)]


class NameParser:
    """
    Parse raw name strings into ParsedName records.

    Example:
        >>> parser = NameParser(CasingPolicy.TITLE)
        >>> parser.parse("smith, john e.").full_name
        'John E Smith'
    """

    def __init__(
        self,
        casing: CasingPolicy = CasingPolicy.NONE,
        strategy: Optional[CaseStrategy] = None,
    ):
        self.casing = CasingPolicy.parse(casing)
        self.strategy = strategy or DefaultCaseStrategy()

    def parse(self, raw: str) -> ParsedName:
        """
        Parse a single raw name.

        Raises:
            ParseError: if a first and a last name cannot both be found
        """
        if raw is None:
            raise ParseError("", "no name given")

        text = " ".join(raw.split())

        if "," in text:
            first, middle, last = self._split_comma_form(raw, text)
        else:
            first, middle, last = self._split_space_form(raw, text)

        first = self.casing.apply(first, self.strategy)
        middle = self.casing.apply(middle, self.strategy)
        last = self.casing.apply(last, self.strategy)

        return ParsedName(
            first_name=first,
            last_name=last,
            middle_name=middle,
            first_initial=self.strategy.upper(first[:1]),
            middle_initial=self.strategy.lower(middle[:1]),
            last_initial=self.strategy.upper(last[:1]),
        )

    def _split_comma_form(self, raw: str, text: str) -> tuple[str, str, str]:
        last, _, remainder = text.partition(",")
        last = last.strip()
        tokens = _usable_tokens(remainder.replace(",", " "))

        if not _strip_period(last) or not tokens:
            raise ParseError(raw, "expected 'Last, First'")

        first = _strip_period(tokens[0])
        middle = _strip_period(tokens[1]) if len(tokens) > 1 else ""
        if len(tokens) > 2:
            logger.debug(f"Ignoring extra tokens in {raw!r}: {tokens[2:]}")
        return first, middle, last

    def _split_space_form(self, raw: str, text: str) -> tuple[str, str, str]:
        tokens = _usable_tokens(text)

        if len(tokens) < 2:
            raise ParseError(raw)

        if len(tokens) == 2:
            return tokens[0], "", tokens[1]

        if len(tokens) > 3:
            logger.debug(f"Ignoring extra tokens in {raw!r}: {tokens[3:]}")
        return tokens[0], _strip_period(tokens[1]), tokens[2]


def parse_name(
    raw: str,
    casing: CasingPolicy = CasingPolicy.NONE,
    strategy: Optional[CaseStrategy] = None,
) -> ParsedName:
    """
    Convenience function to parse one name.

    Args:
        raw: Free-text name ("Smith, John E." or "John E. Smith")
        casing: Casing policy applied to the name fields
        strategy: Optional locale case strategy

    Returns:
        ParsedName
    """
    return NameParser(casing, strategy).parse(raw)
