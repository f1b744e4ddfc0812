"""Async repository for quality profiles stored in PostgreSQL.

Profiles are owned by the surrounding application; this layer only reads
them and turns each row into a frozen QualityProfileRules snapshot, so a
request keeps a consistent view even if the row changes mid-request.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import asyncpg

from reelmatch.shared.enums import AttributeMode
from reelmatch.shared.exceptions import DatabaseError, ProfileDecodeError
from reelmatch.shared.models import AttributeRule, QualityProfileRules

logger = logging.getLogger(__name__)

_RULE_COLUMNS = {
    "hdr": "hdr_settings",
    "video_codec": "video_codec_settings",
    "audio_codec": "audio_codec_settings",
    "audio_channels": "audio_channel_settings",
}

# Per-item modes from the item-map storage format and what they collapse to.
_ITEM_MODE_ALIASES = {
    "required": AttributeMode.REQUIRED,
    "preferred": AttributeMode.PREFERRED,
    "acceptable": AttributeMode.NONE,
    "any": AttributeMode.NONE,
    "none": AttributeMode.NONE,
    "notallowed": AttributeMode.NONE,
}


class QualityProfileRepository:
    """Read access to the ``quality_profiles`` table."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self._pool = pool

    async def find_by_id(self, profile_id: int) -> QualityProfileRules | None:
        """Fetch a single profile by primary key, or None if it does not exist.

        Raises:
            DatabaseError: If PostgreSQL cannot be queried.
            ProfileDecodeError: If the stored rules are malformed.
        """
        try:
            row = await self._pool.fetchrow(
                """
                SELECT id, name, hdr_settings, video_codec_settings,
                       audio_codec_settings, audio_channel_settings,
                       audio_channels_match_any, allowed_qualities
                  FROM quality_profiles
                 WHERE id = $1
                """,
                profile_id,
            )
        except (asyncpg.PostgresError, OSError) as exc:
            raise DatabaseError(f"failed to load quality profile {profile_id}: {exc}") from exc
        if row is None:
            return None
        return _profile_from_row(row)


def _profile_from_row(row: asyncpg.Record) -> QualityProfileRules:
    """Convert an asyncpg Record to a QualityProfileRules model."""
    data: dict[str, Any] = dict(row)
    profile_id = data["id"]
    rules = {field: decode_rule(data.get(column), profile_id=profile_id) for field, column in _RULE_COLUMNS.items()}
    allowed = _decode_json(data.get("allowed_qualities"), profile_id=profile_id) or []
    if not isinstance(allowed, list):
        raise ProfileDecodeError(f"profile {profile_id}: allowed_qualities must be a list")
    return QualityProfileRules(
        id=profile_id,
        name=data.get("name") or "",
        audio_channels_match_any=bool(data.get("audio_channels_match_any") or False),
        allowed_qualities=tuple(str(q) for q in allowed),
        **rules,
    )


def _decode_json(raw: Any, *, profile_id: int) -> Any:
    # jsonb may arrive decoded (codec registered) or as text (no codec)
    if raw is None or raw == "":
        return None
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ProfileDecodeError(f"profile {profile_id}: invalid JSON: {exc}") from exc
    return raw


def decode_rule(raw: Any, *, profile_id: int = 0) -> AttributeRule:
    """Decode one stored dimension rule.

    Two shapes are accepted:

    * ``{"mode": "required", "values": ["DV", "HDR10"]}``
    * ``{"items": {"DV": "required", "HDR10": "preferred"}}`` with per-value
      modes. The strongest mode present wins (required over preferred) and
      only its values are kept; ``acceptable`` and ``notAllowed`` entries do
      not constrain the rule.

    Missing or empty input decodes to a ``none`` rule.

    Raises:
        ProfileDecodeError: For invalid JSON, unknown modes or wrong types.
    """
    data = _decode_json(raw, profile_id=profile_id)
    if data is None:
        return AttributeRule()
    if not isinstance(data, dict):
        raise ProfileDecodeError(f"profile {profile_id}: attribute rule must be an object")

    items = data.get("items")
    if isinstance(items, dict) and "mode" not in data:
        return _rule_from_items(items, profile_id=profile_id)

    mode = _coerce_mode(data.get("mode") or AttributeMode.NONE.value, profile_id=profile_id)
    values = data.get("values") or []
    if not isinstance(values, list):
        raise ProfileDecodeError(f"profile {profile_id}: rule values must be a list")
    return AttributeRule(mode=mode, values=tuple(str(v) for v in values))


def _coerce_mode(raw: Any, *, profile_id: int) -> AttributeMode:
    mode = _ITEM_MODE_ALIASES.get(str(raw).strip().lower())
    if mode is None:
        raise ProfileDecodeError(f"profile {profile_id}: unknown attribute mode {raw!r}")
    return mode


def _rule_from_items(items: dict[str, Any], *, profile_id: int) -> AttributeRule:
    by_mode: dict[AttributeMode, list[str]] = {AttributeMode.REQUIRED: [], AttributeMode.PREFERRED: []}
    for value, raw_mode in items.items():
        mode = _coerce_mode(raw_mode, profile_id=profile_id)
        if mode in by_mode:
            by_mode[mode].append(str(value))
        elif str(raw_mode).strip().lower() == "notallowed":
            logger.warning("profile %d: notAllowed value %s is not enforced and will be accepted", profile_id, value)

    for mode in (AttributeMode.REQUIRED, AttributeMode.PREFERRED):
        if by_mode[mode]:
            return AttributeRule(mode=mode, values=tuple(by_mode[mode]))
    return AttributeRule()
