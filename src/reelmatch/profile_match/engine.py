"""Profile match engine: aggregates per-dimension verdicts into one result."""

from __future__ import annotations

import logging

from reelmatch.profile_match.matcher import DEFAULT_PREFERRED_BONUS, match_rule
from reelmatch.release_parser.classifier import tier_by_name
from reelmatch.shared.enums import AttributeMode, Dimension
from reelmatch.shared.models import (
    AttributeMatchResult,
    ParsedRelease,
    ProfileMatchOutput,
    QualityMatchResult,
    QualityProfileRules,
)

logger = logging.getLogger(__name__)


def _scalar(value: str | None) -> tuple[str, ...]:
    return (value,) if value else ()


def match_quality(parsed: ParsedRelease, allowed_qualities: tuple[str, ...]) -> QualityMatchResult:
    """Check the release's quality tier against the profile's allowed tiers.

    A profile without allowed tiers accepts everything.
    """
    if not allowed_qualities:
        return QualityMatchResult(matches=True, release_tier=parsed.quality_tier)
    if parsed.quality_tier is None:
        return QualityMatchResult(
            matches=False,
            allowed_qualities=allowed_qualities,
            reason="quality tier not detected from release",
        )

    allowed = {name.strip().lower() for name in allowed_qualities}
    unknown = [name for name in allowed_qualities if tier_by_name(name) is None]
    if unknown:
        logger.debug("profile lists unknown quality tier(s): %s", unknown)

    if parsed.quality_tier.lower() in allowed:
        return QualityMatchResult(matches=True, release_tier=parsed.quality_tier, allowed_qualities=allowed_qualities)
    return QualityMatchResult(
        matches=False,
        release_tier=parsed.quality_tier,
        allowed_qualities=allowed_qualities,
        reason=f"quality tier {parsed.quality_tier} is not allowed by profile",
    )


class ProfileMatchEngine:
    """Match parsed releases against quality-profile rules.

    Pure and side-effect free: the same ``(parsed, profile)`` pair always
    produces an identical ProfileMatchOutput.
    """

    def __init__(self, *, preferred_bonus: int = DEFAULT_PREFERRED_BONUS) -> None:
        self._preferred_bonus = preferred_bonus

    def match(self, parsed: ParsedRelease, profile: QualityProfileRules) -> ProfileMatchOutput:
        """Evaluate every attribute dimension and aggregate the verdicts.

        ``all_attributes_match`` only considers dimensions whose mode is
        required; preferred and none never block. ``total_score`` sums the
        per-dimension bonuses and ``combined_score`` adds the release's
        quality score.
        """
        bonus = self._preferred_bonus
        dimensions: dict[Dimension, AttributeMatchResult] = {
            Dimension.HDR: match_rule(
                profile.hdr, parsed.hdr_formats, dimension=Dimension.HDR, preferred_bonus=bonus
            ),
            Dimension.VIDEO_CODEC: match_rule(
                profile.video_codec,
                _scalar(parsed.video_codec),
                dimension=Dimension.VIDEO_CODEC,
                preferred_bonus=bonus,
            ),
            Dimension.AUDIO_CODEC: match_rule(
                profile.audio_codec, parsed.audio_codecs, dimension=Dimension.AUDIO_CODEC, preferred_bonus=bonus
            ),
            Dimension.AUDIO_CHANNELS: match_rule(
                profile.audio_channels,
                parsed.audio_channels,
                dimension=Dimension.AUDIO_CHANNELS,
                sequence=profile.audio_channels_match_any,
                preferred_bonus=bonus,
            ),
        }

        rejection_reasons = tuple(
            f"{dimension.label}: {result.reason}"
            for dimension, result in dimensions.items()
            if result.mode == AttributeMode.REQUIRED and not result.matches and result.reason
        )
        all_match = all(r.matches for r in dimensions.values() if r.mode == AttributeMode.REQUIRED)
        total_score = sum(r.score for r in dimensions.values())

        output = ProfileMatchOutput(
            release=parsed,
            profile_id=profile.id,
            profile_name=profile.name,
            hdr_match=dimensions[Dimension.HDR],
            video_codec_match=dimensions[Dimension.VIDEO_CODEC],
            audio_codec_match=dimensions[Dimension.AUDIO_CODEC],
            audio_channel_match=dimensions[Dimension.AUDIO_CHANNELS],
            quality_match=match_quality(parsed, profile.allowed_qualities),
            quality_score=parsed.quality_score,
            total_score=total_score,
            combined_score=parsed.quality_score + total_score,
            all_attributes_match=all_match,
            rejection_reasons=rejection_reasons,
        )
        logger.debug(
            "profile %d vs %r: all_match=%s combined=%d", profile.id, parsed.title, all_match, output.combined_score
        )
        return output


_default_engine = ProfileMatchEngine()


def match(parsed: ParsedRelease, profile: QualityProfileRules) -> ProfileMatchOutput:
    """Match with the default preferred bonus."""
    return _default_engine.match(parsed, profile)
