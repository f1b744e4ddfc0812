"""Quality classification: canonical tier and numeric quality score."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

RESOLUTION_SCORES: dict[str, int] = {
    "2160p": 100,
    "1080p": 80,
    "720p": 60,
    "480p": 40,
}

SOURCE_SCORES: dict[str, int] = {
    "REMUX": 15,
    "BluRay": 10,
    "WEB-DL": 5,
    "WEBRip": 5,
}

REMUX = "REMUX"


@dataclass(frozen=True, slots=True)
class QualityTier:
    """A canonical quality tier (resolution + source family)."""

    id: int
    name: str
    source: str
    resolution: int
    weight: int


PREDEFINED_TIERS: tuple[QualityTier, ...] = (
    QualityTier(1, "SDTV", "tv", 480, 1),
    QualityTier(2, "DVD", "dvd", 480, 2),
    QualityTier(3, "WEBRip-480p", "webrip", 480, 3),
    QualityTier(4, "HDTV-720p", "tv", 720, 4),
    QualityTier(5, "WEBRip-720p", "webrip", 720, 5),
    QualityTier(6, "WEBDL-720p", "webdl", 720, 6),
    QualityTier(7, "Bluray-720p", "bluray", 720, 7),
    QualityTier(8, "HDTV-1080p", "tv", 1080, 8),
    QualityTier(9, "WEBRip-1080p", "webrip", 1080, 9),
    QualityTier(10, "WEBDL-1080p", "webdl", 1080, 10),
    QualityTier(11, "Bluray-1080p", "bluray", 1080, 11),
    QualityTier(12, "Remux-1080p", "remux", 1080, 12),
    QualityTier(13, "HDTV-2160p", "tv", 2160, 13),
    QualityTier(14, "WEBRip-2160p", "webrip", 2160, 14),
    QualityTier(15, "WEBDL-2160p", "webdl", 2160, 15),
    QualityTier(16, "Bluray-2160p", "bluray", 2160, 16),
    QualityTier(17, "Remux-2160p", "remux", 2160, 17),
)

_TIERS_BY_KEY: dict[tuple[int, str], QualityTier] = {(t.resolution, t.source): t for t in PREDEFINED_TIERS}
_TIERS_BY_NAME: dict[str, QualityTier] = {t.name.lower(): t for t in PREDEFINED_TIERS}

_SOURCE_FAMILIES: dict[str, str] = {
    "REMUX": "remux",
    "BluRay": "bluray",
    "WEB-DL": "webdl",
    "WEBRip": "webrip",
    "HDTV": "tv",
    "SDTV": "tv",
    "DVDRip": "dvd",
}


def _effective_source(source: str | None, attributes: Sequence[str]) -> str | None:
    # A REMUX attribute upgrades whatever disc source was detected.
    if REMUX in attributes:
        return REMUX
    return source


def score(quality: str | None, source: str | None, attributes: Sequence[str] = ()) -> int:
    """Return the relative quality rank of a release.

    Resolution base (2160p=100, 1080p=80, 720p=60, 480p=40, unknown=0) plus a
    source modifier (REMUX +15, BluRay +10, WEB-DL/WEBRip +5, others 0). A
    ``REMUX`` entry in ``attributes`` counts as a REMUX source. Unbounded;
    only meaningful for comparison.
    """
    base = RESOLUTION_SCORES.get(quality or "", 0)
    modifier = SOURCE_SCORES.get(_effective_source(source, attributes) or "", 0)
    return base + modifier


def resolution_value(quality: str | None) -> int:
    """Numeric height for a resolution label, 0 if unknown."""
    if not quality or not quality.endswith("p"):
        return 0
    try:
        return int(quality[:-1])
    except ValueError:
        return 0


def classify(quality: str | None, source: str | None, attributes: Sequence[str] = ()) -> QualityTier | None:
    """Map a resolution and source to its canonical tier, if one exists."""
    family = _SOURCE_FAMILIES.get(_effective_source(source, attributes) or "")
    resolution = resolution_value(quality)
    if family is None or resolution == 0:
        return None
    tier = _TIERS_BY_KEY.get((resolution, family))
    if tier is None:
        logger.debug("no tier for %s/%s", quality, source)
    return tier


def tier_by_name(name: str) -> QualityTier | None:
    """Look up a predefined tier by name, case-insensitively."""
    return _TIERS_BY_NAME.get(name.strip().lower())
