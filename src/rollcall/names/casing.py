"""
Casing policies and locale-aware case strategies.

The parser only knows about a CasingPolicy; how a string is actually
upper-, lower- or title-cased is delegated to a CaseStrategy so that
locale rules (e.g. the Turkish dotted/dotless i) can be swapped without
touching the token-splitting logic.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol

from rollcall.errors import ConfigurationError


class CaseStrategy(Protocol):
    """Locale-specific casing primitives."""

    def upper(self, value: str) -> str:
        ...

    def lower(self, value: str) -> str:
        ...

    def title(self, value: str) -> str:
        ...


class DefaultCaseStrategy:
    """Unicode default casing (str.upper / str.lower)."""

    def upper(self, value: str) -> str:
        return value.upper()

    def lower(self, value: str) -> str:
        return value.lower()

    def title(self, value: str) -> str:
        # Whole-word title case: str.title() would turn "o'brien" into "O'Brien"
        if not value:
            return value
        return self.upper(value[0]) + self.lower(value[1:])


class TurkicCaseStrategy(DefaultCaseStrategy):
    """Casing for tr/az, where i <-> İ and ı <-> I."""

    _UPPER_MAP = str.maketrans({"i": "İ", "ı": "I"})
    _LOWER_MAP = str.maketrans({"I": "ı", "İ": "i"})

    def upper(self, value: str) -> str:
        return value.translate(self._UPPER_MAP).upper()

    def lower(self, value: str) -> str:
        return value.translate(self._LOWER_MAP).lower()


_TURKIC_LANGUAGES = {"tr", "az"}


def strategy_for_locale(locale: Optional[str]) -> CaseStrategy:
    """
    Pick a case strategy for a locale tag such as "en_US" or "tr-TR".

    Unknown or empty locales get the Unicode default.
    """
    if locale:
        language = locale.replace("-", "_").split("_")[0].lower()
        if language in _TURKIC_LANGUAGES:
            return TurkicCaseStrategy()
    return DefaultCaseStrategy()


class CasingPolicy(Enum):
    """How name fields are case-normalized after parsing."""

    NONE = "none"
    UPPER = "upper"
    LOWER = "lower"
    TITLE = "title"

    @classmethod
    def parse(cls, value: Optional[str | "CasingPolicy"]) -> "CasingPolicy":
        """Map a config/CLI string ("upper", "Proper", "") to a policy."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.NONE
        key = value.strip().lower()
        if key in ("", "none", "unspecified"):
            return cls.NONE
        if key == "proper":
            return cls.TITLE
        try:
            return cls(key)
        except ValueError:
            raise ConfigurationError(
                f"Unknown casing policy {value!r} "
                f"(expected one of: none, upper, lower, title, proper)"
            ) from None

    def apply(self, value: str, strategy: Optional[CaseStrategy] = None) -> str:
        strategy = strategy or DefaultCaseStrategy()
        if self is CasingPolicy.UPPER:
            return strategy.upper(value)
        if self is CasingPolicy.LOWER:
            return strategy.lower(value)
        if self is CasingPolicy.TITLE:
            return strategy.title(value)
        return value
