"""
Rollcall Names Module

Parsing of free-text personal names into structured fields.

Key components:
- NameParser / parse_name: "Smith, John E." -> ParsedName
- CasingPolicy: upper / lower / title / none normalization
- CaseStrategy: locale-specific casing rules
"""

from rollcall.names.casing import (
    CaseStrategy,
    CasingPolicy,
    DefaultCaseStrategy,
    TurkicCaseStrategy,
    strategy_for_locale,
)
from rollcall.names.parser import (
    NameParser,
    ParsedName,
    parse_name,
)

__all__ = [
    "CaseStrategy",
    "CasingPolicy",
    "DefaultCaseStrategy",
    "TurkicCaseStrategy",
    "strategy_for_locale",
    "NameParser",
    "ParsedName",
    "parse_name",
]
