"""Tests for the release-title tokenizer and attribute extractor."""

from __future__ import annotations

import pytest

from reelmatch.release_parser.tokenizer import Token, extract, tokenize


def _extract(title: str):
    return extract(title, current_year=2026)


class TestTokenize:
    def test_keeps_separators(self) -> None:
        assert tokenize("Movie.2024-GRP") == [
            Token(text="Movie", sep=""),
            Token(text="2024", sep="."),
            Token(text="GRP", sep="-"),
        ]

    def test_brackets_and_whitespace_are_delimiters(self) -> None:
        tokens = tokenize("Movie Title (2024) [1080p]")
        assert [t.text for t in tokens] == ["Movie", "Title", "2024", "1080p"]

    def test_empty(self) -> None:
        assert tokenize("") == []
        assert tokenize(" ._- ") == []


class TestExtract:
    def test_full_uhd_release(self) -> None:
        raw = _extract("Movie.2024.2160p.BluRay.DV.HDR10.x265.TrueHD.Atmos.7.1.mkv")
        assert raw.title_tokens == ["Movie"]
        assert raw.year == 2024
        assert raw.quality == "2160p"
        assert raw.source == "BluRay"
        assert raw.video_codec == "x265"
        assert raw.hdr_formats == ["DV", "HDR10"]
        assert raw.audio_codecs == ["TrueHD", "Atmos"]
        assert raw.audio_channels == ["7.1"]
        assert raw.extension == "mkv"

    def test_empty_title(self) -> None:
        raw = _extract("")
        assert raw.title_tokens == []
        assert raw.year is None
        assert raw.quality is None
        assert raw.source is None
        assert raw.video_codec is None
        assert raw.hdr_formats == []
        assert raw.audio_codecs == []
        assert raw.audio_channels == []

    def test_unrecognisable_title_is_all_title(self) -> None:
        raw = _extract("Some Random Text")
        assert raw.title_tokens == ["Some", "Random", "Text"]
        assert raw.quality is None
        assert raw.source is None
        assert raw.video_codec is None

    def test_dd_plus_is_not_read_as_dd(self) -> None:
        raw = _extract("Movie.2020.1080p.BluRay.DD+.5.1.x264")
        assert raw.audio_codecs == ["DD+"]
        assert raw.audio_channels == ["5.1"]

    def test_dts_hd_ma_wins_over_dts(self) -> None:
        raw = _extract("Movie.2019.2160p.UHD.BluRay.REMUX.HDR.HEVC.DTS-HD.MA.7.1-GRP")
        assert raw.audio_codecs == ["DTS-HD"]
        assert raw.audio_channels == ["7.1"]
        assert raw.hdr_formats == ["HDR"]
        assert raw.video_codec == "x265"
        assert raw.source == "REMUX"
        assert raw.release_group == "GRP"

    def test_dts_x_variants(self) -> None:
        assert _extract("Movie.2020.2160p.DTS-X.7.1").audio_codecs == ["DTS-X"]
        assert _extract("Movie.2020.2160p.DTS:X").audio_codecs == ["DTS-X"]

    def test_glued_codec_and_channels(self) -> None:
        raw = _extract("Movie.2020.1080p.WEB-DL.DDP5.1.H.264-FLUX")
        assert raw.source == "WEB-DL"
        assert raw.audio_codecs == ["DD+"]
        assert raw.audio_channels == ["5.1"]
        assert raw.video_codec == "x264"
        assert raw.release_group == "FLUX"

    def test_glued_aac_stereo(self) -> None:
        raw = _extract("Show.S03E01.1080p.WEBRip.AAC2.0.x264")
        assert raw.audio_codecs == ["AAC"]
        assert raw.audio_channels == ["2.0"]
        assert raw.source == "WEBRip"

    def test_hdr10_plus_aliases(self) -> None:
        assert _extract("Movie.2021.2160p.HDR10+.x265").hdr_formats == ["HDR10+"]
        assert _extract("Movie.2021.2160p.HDR10Plus.x265").hdr_formats == ["HDR10+"]
        assert _extract("Movie.2021.2160p.Dolby.Vision.x265").hdr_formats == ["DV"]
        assert _extract("Movie.2021.2160p.DoVi.x265").hdr_formats == ["DV"]

    def test_duplicates_are_kept(self) -> None:
        raw = _extract("Movie.2022.2160p.DV.HDR10.DV.TrueHD.TrueHD")
        assert raw.hdr_formats == ["DV", "HDR10", "DV"]
        assert raw.audio_codecs == ["TrueHD", "TrueHD"]

    def test_source_precedence(self) -> None:
        # REMUX outranks BluRay regardless of order
        assert _extract("Movie.2020.1080p.REMUX.BluRay").source == "REMUX"
        assert _extract("Movie.2020.1080p.Blu-Ray.x264").source == "BluRay"
        assert _extract("Movie.2020.1080p.WEB.x264").source == "WEB-DL"
        assert _extract("Movie.2020.1080p.WEBRip.x264").source == "WEBRip"

    def test_first_resolution_wins(self) -> None:
        raw = _extract("Movie.2020.1080p.720p")
        assert raw.quality == "1080p"
        assert raw.resolutions == ["1080p", "720p"]

    def test_4k_alias(self) -> None:
        assert _extract("Movie.2020.4K.WEB-DL").quality == "2160p"

    @pytest.mark.parametrize(
        ("token", "codec", "channels"),
        [("DD+5.1", "DD+", "5.1"), ("TrueHD7.1", "TrueHD", "7.1"), ("EAC3.2.0", "DD+", "2.0")],
    )
    def test_glued_variants(self, token: str, codec: str, channels: str) -> None:
        raw = _extract(f"Movie.2020.1080p.{token}")
        assert raw.audio_codecs == [codec]
        assert raw.audio_channels == [channels]

    def test_season_range_without_second_prefix(self) -> None:
        raw = _extract("Show.S01-04.720p")
        assert (raw.season, raw.end_season) == (1, 4)


class TestYear:
    def test_year_needs_preceding_title(self) -> None:
        raw = _extract("2001.A.Space.Odyssey.1968.1080p.BluRay")
        assert raw.title_tokens == ["2001", "A", "Space", "Odyssey"]
        assert raw.year == 1968

    def test_future_year_beyond_lookahead_is_title(self) -> None:
        raw = _extract("Blade.Runner.2049.2017.1080p")
        assert raw.title_tokens == ["Blade", "Runner", "2049"]
        assert raw.year == 2017

    @pytest.mark.parametrize(("year", "accepted"), [(1899, False), (1900, True), (2031, True), (2032, False)])
    def test_year_range(self, year: int, accepted: bool) -> None:
        raw = _extract(f"Movie.{year}.1080p")
        assert (raw.year == year) is accepted

    def test_parenthesised_year(self) -> None:
        raw = _extract("Movie Title (2024) 1080p")
        assert raw.title_tokens == ["Movie", "Title"]
        assert raw.year == 2024


class TestTvMarkers:
    def test_season_episode(self) -> None:
        raw = _extract("Show.S01E02.720p.WEB-DL.x264.mkv")
        assert raw.is_tv
        assert raw.season == 1
        assert raw.episode == 2
        assert raw.title_tokens == ["Show"]

    def test_multi_episode(self) -> None:
        raw = _extract("Show.Name.S02E05E06.1080p.WEB.h264-GRP")
        assert (raw.season, raw.episode, raw.end_episode) == (2, 5, 6)
        assert raw.title_tokens == ["Show", "Name"]

    def test_multi_episode_dash(self) -> None:
        raw = _extract("Show.S02E05-E06.1080p")
        assert (raw.season, raw.episode, raw.end_episode) == (2, 5, 6)

    def test_cross_format(self) -> None:
        raw = _extract("Show.1x02.720p.HDTV")
        assert (raw.season, raw.episode) == (1, 2)
        assert raw.source == "HDTV"

    def test_season_pack(self) -> None:
        raw = _extract("Show.S01.1080p.BluRay.x264-GRP")
        assert raw.is_season_pack
        assert raw.season == 1
        assert raw.episode is None

    def test_season_range(self) -> None:
        raw = _extract("Show.S01-S04.720p.BluRay")
        assert raw.is_complete_series
        assert (raw.season, raw.end_season) == (1, 4)

    def test_spelled_season_and_episode(self) -> None:
        raw = _extract("Show.Season.2.Episode.7.1080p")
        assert (raw.season, raw.episode) == (2, 7)
        assert not raw.is_season_pack

    def test_spelled_season_pack(self) -> None:
        raw = _extract("Show Season 3 1080p")
        assert raw.is_season_pack
        assert raw.season == 3

    def test_complete_series(self) -> None:
        raw = _extract("Show.Complete.Series.1080p.BluRay")
        assert raw.is_tv
        assert raw.is_complete_series
        assert raw.season is None
        assert raw.title_tokens == ["Show"]


class TestTrailingMetadata:
    def test_edition_and_revision(self) -> None:
        raw = _extract("Movie.2010.Directors.Cut.REPACK.1080p.BluRay.x264-GRP")
        assert raw.editions == ["Director's Cut"]
        assert raw.revision == "REPACK"
        assert raw.release_group == "GRP"

    def test_revision_word_inside_title_is_title(self) -> None:
        raw = _extract("Real.Steel.2011.1080p.BluRay")
        assert raw.title_tokens == ["Real", "Steel"]
        assert raw.revision is None

    def test_group_before_extension(self) -> None:
        assert _extract("Movie.2024.1080p.BluRay.x264-SPARKS.mkv").release_group == "SPARKS"

    def test_codec_suffix_is_not_a_group(self) -> None:
        assert _extract("Movie.2024.1080p.BluRay-x264").release_group is None

    def test_consumed_suffix_is_not_a_group(self) -> None:
        assert _extract("Show.S01E02.720p.WEB-DL").release_group is None


class TestLanguages:
    def test_aliases_are_normalised_and_deduplicated(self) -> None:
        raw = _extract("Movie.2021.FRENCH.VFF.fra.1080p.WEB-DL")
        assert raw.languages == ["French"]
        assert "VFF" in raw.leftovers

    def test_detection_order(self) -> None:
        raw = _extract("Movie.2021.ITA.ENG.Ger.1080p.BluRay")
        assert raw.languages == ["Italian", "German"]

    def test_multi_token_alias(self) -> None:
        assert _extract("Movie.2021.PT-BR.1080p").languages == ["Portuguese"]

    def test_language_word_in_title_stays_title(self) -> None:
        raw = _extract("French.Kiss.1995.1080p.BluRay")
        assert raw.title_tokens == ["French", "Kiss"]
        assert raw.languages == []
