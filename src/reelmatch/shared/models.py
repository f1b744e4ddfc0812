"""Frozen Pydantic domain models shared by all modules.

Every model serialises with camelCase aliases (``hdrFormats``,
``qualityProfileId``) and also accepts snake_case field names on input.
Sequences are tuples so a constructed value cannot be mutated in place.
"""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from reelmatch.shared.enums import AttributeMode

_MODEL_CONFIG = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}


class ParsedRelease(BaseModel):
    """Structured view of a free-text release title."""

    model_config = _MODEL_CONFIG

    title: str = ""
    year: int | None = None

    # TV markers
    season: int | None = None
    end_season: int | None = None
    episode: int | None = None
    end_episode: int | None = None
    is_tv: bool = False
    is_season_pack: bool = False
    is_complete_series: bool = False

    # Video
    quality: str | None = None
    source: str | None = None
    video_codec: str | None = None
    hdr_formats: tuple[str, ...] = ()

    # Audio
    audio_codecs: tuple[str, ...] = ()
    audio_channels: tuple[str, ...] = ()

    # Release metadata
    release_group: str | None = None
    revision: str | None = None
    edition: str | None = None
    # Languages named after the title; empty means English is assumed.
    languages: tuple[str, ...] = ()
    attributes: tuple[str, ...] = ()

    quality_tier: str | None = None
    quality_score: int = 0


class AttributeRule(BaseModel):
    """A profile's rule for one attribute dimension."""

    model_config = _MODEL_CONFIG

    mode: AttributeMode = AttributeMode.NONE
    values: tuple[str, ...] = ()


class QualityProfileRules(BaseModel):
    """Read-only snapshot of a quality profile's matching rules."""

    model_config = _MODEL_CONFIG

    id: int
    name: str = ""
    hdr: AttributeRule = AttributeRule()
    video_codec: AttributeRule = AttributeRule()
    audio_codec: AttributeRule = AttributeRule()
    audio_channels: AttributeRule = AttributeRule()
    # Channels are compared against the first detected layout unless this is set,
    # in which case any detected layout may satisfy the rule.
    audio_channels_match_any: bool = False
    # Canonical tier names (e.g. "Bluray-1080p"); empty allows every tier.
    allowed_qualities: tuple[str, ...] = ()


class AttributeMatchResult(BaseModel):
    """Verdict for one attribute dimension of one release against one profile."""

    model_config = _MODEL_CONFIG

    mode: AttributeMode
    matches: bool
    profile_values: tuple[str, ...] = ()
    release_value: str = ""
    score: int = 0
    reason: str | None = None


class QualityMatchResult(BaseModel):
    """Whether the release's quality tier is allowed by the profile."""

    model_config = _MODEL_CONFIG

    matches: bool
    release_tier: str | None = None
    allowed_qualities: tuple[str, ...] = ()
    reason: str | None = None


class ProfileMatchOutput(BaseModel):
    """Aggregate verdict of a release against every dimension of a profile."""

    model_config = _MODEL_CONFIG

    release: ParsedRelease
    profile_id: int
    profile_name: str = ""

    hdr_match: AttributeMatchResult
    video_codec_match: AttributeMatchResult
    audio_codec_match: AttributeMatchResult
    audio_channel_match: AttributeMatchResult
    quality_match: QualityMatchResult

    quality_score: int
    total_score: int
    combined_score: int
    all_attributes_match: bool
    rejection_reasons: tuple[str, ...] = ()
