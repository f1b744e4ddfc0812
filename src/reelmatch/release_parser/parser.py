"""Release title parsing: tokenizer output composed into a ParsedRelease."""

from __future__ import annotations

import logging

from reelmatch.release_parser import classifier
from reelmatch.release_parser.tokenizer import RawTokens, extract
from reelmatch.shared.models import ParsedRelease

logger = logging.getLogger(__name__)


class ReleaseParser:
    """Parse free-text release titles into ParsedRelease records.

    Stateless apart from its configuration, so one instance can be shared by
    any number of concurrent callers.
    """

    def __init__(self, *, year_lookahead: int = 5, current_year: int | None = None) -> None:
        self._year_lookahead = year_lookahead
        self._current_year = current_year

    def parse(self, release_title: str) -> ParsedRelease:
        """Parse a release title.

        Never raises for string input: an unrecognisable title yields a
        record whose ``title`` is the original string and whose attribute
        fields are empty.

        Args:
            release_title: Raw release title, optionally with an extension.

        Returns:
            Immutable ParsedRelease with ``quality_score`` computed.
        """
        raw = extract(release_title, current_year=self._current_year, year_lookahead=self._year_lookahead)
        parsed = _build(release_title, raw)
        logger.debug("parsed %r -> quality=%s score=%d", release_title, parsed.quality, parsed.quality_score)
        return parsed


def _build(release_title: str, raw: RawTokens) -> ParsedRelease:
    attributes: list[str] = []
    if raw.has_remux:
        attributes.append(classifier.REMUX)
    attributes.extend(raw.hdr_formats)

    quality = raw.quality
    source = raw.source
    tier = classifier.classify(quality, source, attributes)

    title = " ".join(raw.title_tokens) or release_title.strip()

    return ParsedRelease(
        title=title,
        year=raw.year,
        season=raw.season,
        end_season=raw.end_season,
        episode=raw.episode,
        end_episode=raw.end_episode,
        is_tv=raw.is_tv,
        is_season_pack=raw.is_season_pack,
        is_complete_series=raw.is_complete_series,
        quality=quality,
        source=source,
        video_codec=raw.video_codec,
        hdr_formats=tuple(raw.hdr_formats),
        audio_codecs=tuple(raw.audio_codecs),
        audio_channels=tuple(raw.audio_channels),
        release_group=raw.release_group,
        revision=raw.revision,
        edition=" ".join(raw.editions) or None,
        languages=tuple(raw.languages),
        attributes=tuple(attributes),
        quality_tier=tier.name if tier else None,
        quality_score=classifier.score(quality, source, attributes),
    )


_default_parser = ReleaseParser()


def parse(release_title: str) -> ParsedRelease:
    """Parse with default settings (current year, five-year lookahead)."""
    return _default_parser.parse(release_title)
