"""API routes for the slot debug panel: release parsing and profile matching."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from reelmatch.config import Settings, get_settings
from reelmatch.debug_api.schemas import ParseReleaseInput, ProfileMatchInput
from reelmatch.profile_match.engine import ProfileMatchEngine
from reelmatch.release_parser.parser import ReleaseParser
from reelmatch.shared.exceptions import DatabaseError, NotFoundError, ValidationError
from reelmatch.shared.models import ParsedRelease, ProfileMatchOutput, QualityProfileRules
from reelmatch.shared.repository import QualityProfileRepository

logger = logging.getLogger(__name__)


def _state(request: Request, key: str) -> Any:
    return getattr(request.app.state, key, None)


def _settings(request: Request) -> Settings:
    settings = _state(request, "settings")
    return settings if isinstance(settings, Settings) else get_settings()


def _require_developer_mode(request: Request) -> None:
    if not _settings(request).developer_mode:
        raise HTTPException(status_code=403, detail="debug features require developer mode")


router = APIRouter()
debug_router = APIRouter(prefix="/settings/slots/debug", dependencies=[Depends(_require_developer_mode)])


def _get_parser(request: Request) -> ReleaseParser:
    parser = _state(request, "parser")
    if parser is None:
        parser = ReleaseParser(year_lookahead=_settings(request).year_lookahead)
    return parser


def _get_engine(request: Request) -> ProfileMatchEngine:
    engine = _state(request, "engine")
    if engine is None:
        engine = ProfileMatchEngine(preferred_bonus=_settings(request).preferred_bonus)
    return engine


def _get_db_pool(request: Request) -> Any:
    db_pool = _state(request, "db_pool")
    if db_pool is None or not hasattr(db_pool, "fetchrow"):
        raise HTTPException(status_code=503, detail="database unavailable")
    return db_pool


def _validated_title(release_title: str) -> str:
    if not release_title.strip():
        raise ValidationError("releaseTitle", "releaseTitle is required")
    return release_title


async def _load_profile(request: Request, profile_id: int) -> QualityProfileRules:
    """Fetch one profile snapshot for the duration of a request."""
    repo = QualityProfileRepository(_get_db_pool(request))
    try:
        profile = await repo.find_by_id(profile_id)
    except DatabaseError as exc:
        logger.warning("profile lookup failed for %d: %s", profile_id, exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    if profile is None:
        raise NotFoundError(f"quality profile {profile_id} not found")
    return profile


@debug_router.post("/parse", response_model=ParsedRelease, response_model_exclude_none=True)
async def parse_release(body: ParseReleaseInput, request: Request) -> ParsedRelease:
    """Parse a release title into its quality attributes."""
    try:
        title = _validated_title(body.release_title)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    parsed = _get_parser(request).parse(title)
    logger.info("parsed release %r (quality=%s, score=%d)", title, parsed.quality, parsed.quality_score)
    return parsed


@debug_router.post("/match", response_model=ProfileMatchOutput, response_model_exclude_none=True)
async def match_profile(body: ProfileMatchInput, request: Request) -> ProfileMatchOutput:
    """Parse a release title and match it against a quality profile."""
    try:
        title = _validated_title(body.release_title)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        profile = await _load_profile(request, body.quality_profile_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    parsed = _get_parser(request).parse(title)
    output = _get_engine(request).match(parsed, profile)
    logger.info(
        "matched %r against profile %d: all_match=%s combined=%d",
        title,
        profile.id,
        output.all_attributes_match,
        output.combined_score,
    )
    return output


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Status dictionary
    """
    return {"status": "ok"}


router.include_router(debug_router)
