"""Release-title tokenizer and attribute extractor.

A title is split on the usual release delimiters into tokens that remember
the separator in front of them. Tokens are then matched against fixed,
case-insensitive lookup tables. Aliases can span several tokens
(``WEB-DL``, ``DTS-HD.MA``, ``H.265``), so at every position the candidate
aliases are tried longest first: ``DTS-HD`` wins over ``DTS`` and the
single token ``DD+`` is never read as ``DD``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

logger = logging.getLogger(__name__)

# Delimiters between tokens. Brackets count too so "(2024)" reads as a year.
_TOKEN_RE = re.compile(r"[^.\s_\-\[\]()]+")

_CONTAINER_EXTENSIONS = frozenset({"mkv", "mp4", "avi", "m4v", "wmv", "mov", "webm", "m2ts", "mpg"})

# Words that look like "-GROUP" suffixes but are codecs or containers.
_GROUP_FALSE_POSITIVES = frozenset(
    {"x264", "x265", "hevc", "avc", "h264", "h265", "xvid", "divx", "av1", "vp9"} | _CONTAINER_EXTENSIONS
)

_YEAR_RE = re.compile(r"^\d{4}$")
_DIGIT_RE = re.compile(r"^\d$")
_GLUED_AUDIO_RE = re.compile(r"^(.+?)(\d)$")
_GROUP_RE = re.compile(r"^[A-Za-z0-9]+$")

# TV markers
_EPISODE_RE = re.compile(r"^s(\d{1,2})e(\d{1,3})(?:e(\d{1,3}))?$")
_CROSS_EPISODE_RE = re.compile(r"^(\d{1,2})x(\d{1,3})$")
_EXTRA_EPISODE_RE = re.compile(r"^e(\d{1,3})$")
_SEASON_RE = re.compile(r"^s(\d{1,2})$")
_SEASON_END_RE = re.compile(r"^s?(\d{1,2})$")
_NUMBER_RE = re.compile(r"^\d{1,3}$")

# ── Lookup tables ───────────────────────────────────────────────
#
# Keys are lower-case aliases; a multi-token alias is written with "." between
# its parts and matches any delimiter in the title.

RESOLUTIONS: dict[str, str] = {
    "2160p": "2160p",
    "4k": "2160p",
    "uhd": "2160p",
    "1080p": "1080p",
    "720p": "720p",
    "480p": "480p",
}

SOURCES: dict[str, str] = {
    "remux": "REMUX",
    "bdremux": "REMUX",
    "bluray": "BluRay",
    "blu.ray": "BluRay",
    "bdrip": "BluRay",
    "brrip": "BluRay",
    "web.dl": "WEB-DL",
    "webdl": "WEB-DL",
    "web": "WEB-DL",
    "webrip": "WEBRip",
    "web.rip": "WEBRip",
    "hdtv": "HDTV",
    "dvdrip": "DVDRip",
    "dvd.rip": "DVDRip",
    "sdtv": "SDTV",
    "pdtv": "SDTV",
    "cam": "CAM",
    "hdcam": "CAM",
    "camrip": "CAM",
    "telesync": "CAM",
}

VIDEO_CODECS: dict[str, str] = {
    "x265": "x265",
    "h265": "x265",
    "h.265": "x265",
    "hevc": "x265",
    "x264": "x264",
    "h264": "x264",
    "h.264": "x264",
    "avc": "x264",
    "av1": "AV1",
    "vp9": "VP9",
    "xvid": "XviD",
    "divx": "DivX",
    "mpeg2": "MPEG2",
    "mpeg.2": "MPEG2",
}

HDR_FORMATS: dict[str, str] = {
    "dv": "DV",
    "dovi": "DV",
    "dolby.vision": "DV",
    "dolbyvision": "DV",
    "hdr10+": "HDR10+",
    "hdr10plus": "HDR10+",
    "hdr10": "HDR10",
    "hdr": "HDR",
    "hlg": "HLG",
}

AUDIO_CODECS: dict[str, str] = {
    "atmos": "Atmos",
    "dts.x": "DTS-X",
    "dts:x": "DTS-X",
    "dtsx": "DTS-X",
    "dts.hd.ma": "DTS-HD",
    "dts.hdma": "DTS-HD",
    "dtshd.ma": "DTS-HD",
    "dtshdma": "DTS-HD",
    "dts.hd": "DTS-HD",
    "dtshd": "DTS-HD",
    "truehd": "TrueHD",
    "true.hd": "TrueHD",
    "dts": "DTS",
    "dd+": "DD+",
    "ddp": "DD+",
    "eac3": "DD+",
    "e.ac3": "DD+",
    "e.ac.3": "DD+",
    "dd": "DD",
    "ac3": "DD",
    "ac.3": "DD",
    "aac": "AAC",
    "flac": "FLAC",
}

EDITIONS: dict[str, str] = {
    "director's.cut": "Director's Cut",
    "directors.cut": "Director's Cut",
    "director.cut": "Director's Cut",
    "extended.cut": "Extended Cut",
    "extended": "Extended",
    "theatrical": "Theatrical",
    "theatrical.cut": "Theatrical",
    "theatrical.edition": "Theatrical",
    "unrated": "Unrated",
    "uncut": "Uncut",
    "ultimate.cut": "Ultimate Cut",
    "final.cut": "Final Cut",
    "special.edition": "Special Edition",
    "collector's.edition": "Collector's Edition",
    "collectors.edition": "Collector's Edition",
    "anniversary.edition": "Anniversary Edition",
    "criterion": "Criterion",
    "imax": "IMAX",
    "3d": "3D",
    "remastered": "Remastered",
    "restored": "Restored",
}

REVISIONS: dict[str, str] = {
    "proper": "Proper",
    "repack": "REPACK",
    "real": "REAL",
    "rerip": "RERIP",
}

# Only consulted after the title, where three-letter codes are unambiguous.
LANGUAGES: dict[str, str] = {
    "german": "German",
    "deutsch": "German",
    "ger": "German",
    "deu": "German",
    "french": "French",
    "français": "French",
    "fra": "French",
    "fre": "French",
    "spanish": "Spanish",
    "español": "Spanish",
    "spa": "Spanish",
    "esp": "Spanish",
    "italian": "Italian",
    "italiano": "Italian",
    "ita": "Italian",
    "portuguese": "Portuguese",
    "português": "Portuguese",
    "por": "Portuguese",
    "pt.br": "Portuguese",
    "russian": "Russian",
    "русский": "Russian",
    "rus": "Russian",
    "japanese": "Japanese",
    "日本語": "Japanese",
    "jpn": "Japanese",
    "jap": "Japanese",
    "korean": "Korean",
    "한국어": "Korean",
    "kor": "Korean",
    "chinese": "Chinese",
    "中文": "Chinese",
    "chi": "Chinese",
    "chs": "Chinese",
    "cht": "Chinese",
    "mandarin": "Chinese",
    "cantonese": "Chinese",
    "dutch": "Dutch",
    "nederlands": "Dutch",
    "nld": "Dutch",
    "dut": "Dutch",
    "polish": "Polish",
    "polski": "Polish",
    "pol": "Polish",
    "swedish": "Swedish",
    "svenska": "Swedish",
    "swe": "Swedish",
    "norwegian": "Norwegian",
    "norsk": "Norwegian",
    "nor": "Norwegian",
    "danish": "Danish",
    "dansk": "Danish",
    "dan": "Danish",
    "finnish": "Finnish",
    "suomi": "Finnish",
    "fin": "Finnish",
    "turkish": "Turkish",
    "türkçe": "Turkish",
    "tur": "Turkish",
    "hindi": "Hindi",
    "hin": "Hindi",
    "arabic": "Arabic",
    "العربية": "Arabic",
    "ara": "Arabic",
    "hebrew": "Hebrew",
    "עברית": "Hebrew",
    "heb": "Hebrew",
    "czech": "Czech",
    "čeština": "Czech",
    "cze": "Czech",
    "ces": "Czech",
    "hungarian": "Hungarian",
    "magyar": "Hungarian",
    "hun": "Hungarian",
    "greek": "Greek",
    "ελληνικά": "Greek",
    "gre": "Greek",
    "ell": "Greek",
    "thai": "Thai",
    "ไทย": "Thai",
    "tha": "Thai",
    "vietnamese": "Vietnamese",
    "tiếng.việt": "Vietnamese",
    "vie": "Vietnamese",
    "indonesian": "Indonesian",
    "bahasa.indonesia": "Indonesian",
    "ind": "Indonesian",
    "romanian": "Romanian",
    "română": "Romanian",
    "ron": "Romanian",
    "rum": "Romanian",
    "ukrainian": "Ukrainian",
    "українська": "Ukrainian",
    "ukr": "Ukrainian",
}

# Scalar source picked when several are present, best first.
SOURCE_PRECEDENCE: tuple[str, ...] = ("REMUX", "BluRay", "WEBRip", "WEB-DL", "HDTV", "DVDRip", "SDTV", "CAM")

# Category tags for the attribute tables.
RESOLUTION = "resolution"
SOURCE = "source"
VIDEO_CODEC = "video_codec"
HDR = "hdr"
AUDIO_CODEC = "audio_codec"


@dataclass(frozen=True, slots=True)
class Token:
    """One delimiter-free run of a title plus the separator in front of it."""

    text: str
    sep: str

    @property
    def lower(self) -> str:
        return self.text.lower()


@dataclass(frozen=True, slots=True)
class _Alias:
    parts: tuple[str, ...]
    category: str
    value: str


@dataclass(slots=True)
class RawTokens:
    """Everything the extractor recognised in one title, in detection order."""

    title_tokens: list[str] = field(default_factory=list)
    year: int | None = None

    season: int | None = None
    end_season: int | None = None
    episode: int | None = None
    end_episode: int | None = None
    is_tv: bool = False
    is_season_pack: bool = False
    is_complete_series: bool = False

    resolutions: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    video_codecs: list[str] = field(default_factory=list)
    hdr_formats: list[str] = field(default_factory=list)
    audio_codecs: list[str] = field(default_factory=list)
    audio_channels: list[str] = field(default_factory=list)

    editions: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    revision: str | None = None
    release_group: str | None = None
    extension: str | None = None
    leftovers: list[str] = field(default_factory=list)

    def add(self, category: str, value: str) -> None:
        bucket = {
            RESOLUTION: self.resolutions,
            SOURCE: self.sources,
            VIDEO_CODEC: self.video_codecs,
            HDR: self.hdr_formats,
            AUDIO_CODEC: self.audio_codecs,
        }[category]
        bucket.append(value)

    @property
    def quality(self) -> str | None:
        return self.resolutions[0] if self.resolutions else None

    @property
    def source(self) -> str | None:
        for candidate in SOURCE_PRECEDENCE:
            if candidate in self.sources:
                return candidate
        return None

    @property
    def video_codec(self) -> str | None:
        return self.video_codecs[0] if self.video_codecs else None

    @property
    def has_remux(self) -> bool:
        return "REMUX" in self.sources


def _build_index(tables: Iterable[tuple[str, dict[str, str]]]) -> dict[str, list[_Alias]]:
    """Index aliases by first token, each bucket sorted longest alias first."""
    index: dict[str, list[_Alias]] = {}
    for category, table in tables:
        for key, value in table.items():
            parts = tuple(key.split("."))
            index.setdefault(parts[0], []).append(_Alias(parts, category, value))
    for bucket in index.values():
        bucket.sort(key=lambda a: (len(a.parts), sum(len(p) for p in a.parts)), reverse=True)
    return index


_ATTRIBUTE_INDEX = _build_index(
    [
        (RESOLUTION, RESOLUTIONS),
        (SOURCE, SOURCES),
        (VIDEO_CODEC, VIDEO_CODECS),
        (HDR, HDR_FORMATS),
        (AUDIO_CODEC, AUDIO_CODECS),
    ]
)
_EDITION_INDEX = _build_index([("edition", EDITIONS)])
_LANGUAGE_INDEX = _build_index([("language", LANGUAGES)])

# Single-token audio aliases, longest first, for glued forms like "DDP5.1".
_GLUED_AUDIO_PREFIXES = {k: v for k, v in AUDIO_CODECS.items() if "." not in k}


def tokenize(title: str) -> list[Token]:
    """Split a title into tokens, keeping the separator before each one."""
    tokens: list[Token] = []
    prev_end = 0
    for match in _TOKEN_RE.finditer(title):
        tokens.append(Token(text=match.group(0), sep=title[prev_end : match.start()]))
        prev_end = match.end()
    return tokens


def _match_alias(tokens: list[Token], i: int, index: dict[str, list[_Alias]]) -> _Alias | None:
    for alias in index.get(tokens[i].lower, ()):
        n = len(alias.parts)
        if i + n > len(tokens):
            continue
        if all(tokens[i + k].lower == alias.parts[k] for k in range(1, n)):
            return alias
    return None


def _is_channel_pair(tokens: list[Token], i: int) -> bool:
    return (
        i + 1 < len(tokens)
        and _DIGIT_RE.match(tokens[i].text) is not None
        and tokens[i + 1].sep == "."
        and _DIGIT_RE.match(tokens[i + 1].text) is not None
    )


def _match_glued_audio(tokens: list[Token], i: int) -> tuple[str, str] | None:
    """Recognise ``DDP5`` + ``1`` style codec/channel pairs."""
    match = _GLUED_AUDIO_RE.match(tokens[i].lower)
    if match is None:
        return None
    codec = _GLUED_AUDIO_PREFIXES.get(match.group(1))
    if codec is None:
        return None
    if i + 1 >= len(tokens) or tokens[i + 1].sep != "." or not _DIGIT_RE.match(tokens[i + 1].text):
        return None
    return codec, f"{match.group(2)}.{tokens[i + 1].text}"


def _match_tv_marker(tokens: list[Token], i: int, raw: RawTokens) -> int:
    """Consume a TV marker at ``i``; return the number of tokens used (0 if none)."""
    text = tokens[i].lower
    nxt = tokens[i + 1] if i + 1 < len(tokens) else None

    match = _EPISODE_RE.match(text)
    if match:
        raw.is_tv = True
        raw.season = int(match.group(1))
        raw.episode = int(match.group(2))
        if match.group(3):
            raw.end_episode = int(match.group(3))
            return 1
        if nxt is not None and nxt.sep in ("-", "") and (extra := _EXTRA_EPISODE_RE.match(nxt.lower)):
            raw.end_episode = int(extra.group(1))
            return 2
        return 1

    match = _CROSS_EPISODE_RE.match(text)
    if match:
        raw.is_tv = True
        raw.season = int(match.group(1))
        raw.episode = int(match.group(2))
        return 1

    match = _SEASON_RE.match(text)
    if match:
        raw.is_tv = True
        raw.is_season_pack = True
        raw.season = int(match.group(1))
        if nxt is not None and nxt.sep == "-" and (end := _SEASON_END_RE.match(nxt.lower)):
            raw.end_season = int(end.group(1))
            raw.is_complete_series = True
            return 2
        return 1

    if text == "season" and nxt is not None and _NUMBER_RE.match(nxt.text):
        raw.is_tv = True
        raw.season = int(nxt.text)
        if (
            i + 3 < len(tokens)
            and tokens[i + 2].lower == "episode"
            and _NUMBER_RE.match(tokens[i + 3].text)
        ):
            raw.episode = int(tokens[i + 3].text)
            return 4
        raw.is_season_pack = True
        return 2

    if text == "complete" and not raw.is_tv and i > 0:
        raw.is_tv = True
        raw.is_season_pack = True
        raw.is_complete_series = True
        if nxt is not None and nxt.lower == "series":
            return 2
        return 1

    return 0


def _is_year(token: Token, max_year: int) -> bool:
    if not _YEAR_RE.match(token.text):
        return False
    return 1900 <= int(token.text) <= max_year


def _find_title_end(tokens: list[Token], max_year: int) -> int | None:
    """Index of the first year or TV marker that follows at least one title token."""
    for i in range(1, len(tokens)):
        if _is_year(tokens[i], max_year) or _match_tv_marker(tokens, i, RawTokens()):
            return i
    return None


def extract(title: str, *, current_year: int | None = None, year_lookahead: int = 5) -> RawTokens:
    """Scan a release title and return everything recognised in it.

    Everything before the first year or TV marker is the title, so title
    words such as "Web" or "Cam" are never read as attributes. Without a
    year or TV marker the title ends at the first recognised attribute.
    Unrecognised tokens after the title are checked for edition, language,
    revision and release group, and are otherwise kept as leftovers. Never
    raises; an unrecognisable title simply yields an empty result.

    Args:
        title: Raw release title, optionally with a container extension.
        current_year: Reference year for year detection (defaults to today).
        year_lookahead: Years beyond ``current_year`` still accepted.

    Returns:
        A RawTokens record in detection order.
    """
    raw = RawTokens()
    tokens = tokenize(title)

    if len(tokens) > 1 and tokens[-1].sep == "." and tokens[-1].lower in _CONTAINER_EXTENSIONS:
        raw.extension = tokens.pop().lower

    max_year = (current_year if current_year is not None else date.today().year) + year_lookahead
    in_title = True
    consumed_last = False
    i = 0

    title_end = _find_title_end(tokens, max_year)
    if title_end is not None:
        raw.title_tokens = [t.text for t in tokens[:title_end]]
        in_title = False
        i = title_end
        if _is_year(tokens[i], max_year):
            raw.year = int(tokens[i].text)
            consumed_last = True
            i += 1

    while i < len(tokens):
        token = tokens[i]
        consumed_last = True

        if not raw.is_tv:
            used = _match_tv_marker(tokens, i, raw)
            if used:
                in_title = False
                i += used
                continue

        alias = _match_alias(tokens, i, _ATTRIBUTE_INDEX)
        if alias is not None:
            raw.add(alias.category, alias.value)
            in_title = False
            i += len(alias.parts)
            continue

        glued = _match_glued_audio(tokens, i)
        if glued is not None:
            raw.audio_codecs.append(glued[0])
            raw.audio_channels.append(glued[1])
            in_title = False
            i += 2
            continue

        if _is_channel_pair(tokens, i):
            raw.audio_channels.append(f"{token.text}.{tokens[i + 1].text}")
            in_title = False
            i += 2
            continue

        if in_title:
            raw.title_tokens.append(token.text)
            i += 1
            continue

        edition = _match_alias(tokens, i, _EDITION_INDEX)
        if edition is not None:
            raw.editions.append(edition.value)
            i += len(edition.parts)
            continue

        language = _match_alias(tokens, i, _LANGUAGE_INDEX)
        if language is not None:
            if language.value not in raw.languages:
                raw.languages.append(language.value)
            i += len(language.parts)
            continue

        if raw.revision is None and token.lower in REVISIONS:
            raw.revision = REVISIONS[token.lower]
            i += 1
            continue

        raw.leftovers.append(token.text)
        consumed_last = False
        i += 1

    if tokens and not consumed_last:
        last = tokens[-1]
        if last.sep.endswith("-") and _GROUP_RE.match(last.text) and last.lower not in _GROUP_FALSE_POSITIVES:
            raw.release_group = last.text
            raw.leftovers.pop()

    logger.debug(
        "extracted %d token(s): title=%r quality=%s sources=%s", len(tokens), raw.title_tokens, raw.quality, raw.sources
    )
    return raw
