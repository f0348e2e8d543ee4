"""
Identity Endpoints

Endpoints for parsing names and resolving them to directory accounts.
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any
import logging
import threading

from rollcall.directory import DirectoryClient, build_directory
from rollcall.identity import IdentityResolver, MatchTier
from rollcall.names import CasingPolicy, NameParser, strategy_for_locale

logger = logging.getLogger(__name__)

router = APIRouter()

_directory_lock = threading.Lock()


class ParseRequest(BaseModel):
    """Name parse request."""
    name: str = Field(..., description="Free-text name, e.g. 'Smith, John E.'")
    casing: Optional[str] = Field(None, description="none, upper, lower, title/proper")


class ResolveRequest(BaseModel):
    """Single-name resolve request."""
    name: str = Field(..., description="Free-text name, e.g. 'John Smith'")
    casing: Optional[str] = Field(None, description="none, upper, lower, title/proper")
    tier: Optional[str] = Field(None, description="Only return matches at this tier")


class BatchResolveRequest(BaseModel):
    """Batch resolve request."""
    names: List[str] = Field(..., min_length=1, max_length=1000)
    casing: Optional[str] = None
    tier: Optional[str] = None


def get_directory(request: Request) -> DirectoryClient:
    """Directory injected at app creation, or built from config on first use."""
    state = request.app.state
    if state.directory is None:
        with _directory_lock:
            if state.directory is None:
                logger.info(f"Initializing '{state.config.backend}' directory backend")
                state.directory = build_directory(state.config)
    return state.directory


def _resolver(request: Request, directory: DirectoryClient, casing: Optional[str]) -> IdentityResolver:
    config = request.app.state.config
    return IdentityResolver(
        directory,
        casing=CasingPolicy.parse(casing or config.casing),
        strategy=strategy_for_locale(config.locale),
    )


@router.post("/identity/parse", response_model=Dict[str, Any])
def parse(body: ParseRequest, request: Request):
    """
    Parse a free-text name into first, middle and last name plus initials.
    """
    config = request.app.state.config
    parser = NameParser(
        CasingPolicy.parse(body.casing or config.casing),
        strategy_for_locale(config.locale),
    )
    parsed = parser.parse(body.name)
    return {"input": body.name, "parsed": parsed.to_dict()}


@router.post("/identity/resolve", response_model=Dict[str, Any])
def resolve(
    body: ResolveRequest,
    request: Request,
    directory: DirectoryClient = Depends(get_directory),
):
    """
    Resolve a name to directory accounts.

    Returns the tier the cascade stopped at, the number of candidates
    found there and the (optionally tier-filtered) results.
    """
    tier_filter = MatchTier.parse(body.tier)
    resolution = _resolver(request, directory, body.casing).resolve_detailed(body.name)

    payload = resolution.to_dict()
    payload["input"] = body.name
    payload["results"] = [r.to_dict() for r in resolution.filtered(tier_filter)]
    return payload


@router.post("/identity/resolve/batch", response_model=Dict[str, Any])
def resolve_batch(
    body: BatchResolveRequest,
    request: Request,
    directory: DirectoryClient = Depends(get_directory),
):
    """
    Resolve many names in one call.

    Unparseable names are reported per item; a directory failure fails
    the whole request.
    """
    tier_filter = MatchTier.parse(body.tier)
    items = _resolver(request, directory, body.casing).resolve_many(
        body.names, tier_filter=tier_filter
    )

    results = []
    for item in items:
        if item.error is not None:
            results.append({"input": item.input, "error": str(item.error)})
            continue
        entry = item.resolution.to_dict()
        entry["input"] = item.input
        entry["results"] = [r.to_dict() for r in item.results()]
        results.append(entry)

    return {
        "items": results,
        "count": len(results),
        "matched": sum(1 for i in items if i.resolution and i.resolution.is_match),
    }
