"""
Rollcall Identity Module

Tiered resolution of names to directory accounts.

Key components:
- IdentityResolver: Exact -> LastName -> FirstName matching cascade
- MatchTier: confidence of a match
- MatchResult: one candidate account with tier and candidate count
- Resolution: full outcome of one cascade run
"""

from rollcall.identity.resolver import (
    CASCADE,
    NO_MATCH_NOTE,
    BatchItem,
    IdentityResolver,
    MatchResult,
    MatchTier,
    NameInput,
    Resolution,
    resolve_identity,
)

__all__ = [
    "CASCADE",
    "NO_MATCH_NOTE",
    "BatchItem",
    "IdentityResolver",
    "MatchResult",
    "MatchTier",
    "NameInput",
    "Resolution",
    "resolve_identity",
]
