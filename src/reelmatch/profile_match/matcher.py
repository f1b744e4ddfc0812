"""Per-dimension matching of release attributes against profile rules."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from reelmatch.shared.enums import AttributeMode, Dimension
from reelmatch.shared.models import AttributeMatchResult, AttributeRule

logger = logging.getLogger(__name__)

DEFAULT_PREFERRED_BONUS = 10


def _folded(values: Sequence[str]) -> set[str]:
    return {v.strip().casefold() for v in values if v.strip()}


def _test(release_values: Sequence[str], profile_values: Sequence[str], *, sequence: bool) -> bool:
    accepted = _folded(profile_values)
    if sequence:
        return bool(accepted & _folded(release_values))
    if not release_values:
        return False
    return release_values[0].strip().casefold() in accepted


def mismatch_reason(dimension: Dimension, profile_values: Sequence[str], release_value: str) -> str:
    expected = ", ".join(profile_values)
    return (
        f"release does not contain required {dimension.value}: "
        f"expected one of [{expected}], got {release_value or '(empty)'}"
    )


def match_dimension(
    mode: AttributeMode,
    profile_values: Sequence[str],
    release_values: Sequence[str],
    *,
    dimension: Dimension,
    sequence: bool | None = None,
    preferred_bonus: int = DEFAULT_PREFERRED_BONUS,
) -> AttributeMatchResult:
    """Evaluate one attribute dimension of a release against one rule.

    Args:
        mode: Rule strength configured on the profile.
        profile_values: Values the profile accepts.
        release_values: Values detected in the release, in detection order.
            Scalar dimensions compare and report only the first value.
        dimension: Which dimension is being matched; names it in reasons and
            picks sequence vs. scalar comparison unless ``sequence`` is given.
        sequence: Force any-overlap (True) or first-value membership (False).
        preferred_bonus: Score awarded for a satisfied preferred rule.

    Returns:
        The verdict. ``reason`` is set only for failed required rules and
        ``score`` is non-zero only for satisfied preferred rules.
    """
    if sequence is None:
        sequence = dimension.is_sequence
    profile_tuple = tuple(profile_values)
    if not sequence:
        # Scalar dimensions compare and report the first detected value only.
        release_values = tuple(release_values[:1])
    release_value = ", ".join(release_values)

    # A rule without values constrains nothing.
    if mode == AttributeMode.NONE or not _folded(profile_tuple):
        return AttributeMatchResult(mode=mode, matches=True, profile_values=profile_tuple, release_value=release_value)

    matches = _test(release_values, profile_tuple, sequence=sequence)

    if mode == AttributeMode.REQUIRED:
        reason = None if matches else mismatch_reason(dimension, profile_tuple, release_value)
        if reason:
            logger.debug("%s mismatch: %s", dimension.name, reason)
        return AttributeMatchResult(
            mode=mode,
            matches=matches,
            profile_values=profile_tuple,
            release_value=release_value,
            reason=reason,
        )

    return AttributeMatchResult(
        mode=mode,
        matches=matches,
        profile_values=profile_tuple,
        release_value=release_value,
        score=preferred_bonus if matches else 0,
    )


def match_rule(
    rule: AttributeRule,
    release_values: Sequence[str],
    *,
    dimension: Dimension,
    sequence: bool | None = None,
    preferred_bonus: int = DEFAULT_PREFERRED_BONUS,
) -> AttributeMatchResult:
    """Convenience wrapper around :func:`match_dimension` for an AttributeRule."""
    return match_dimension(
        rule.mode,
        rule.values,
        release_values,
        dimension=dimension,
        sequence=sequence,
        preferred_bonus=preferred_bonus,
    )
