"""Tests for QualityProfileRepository and stored-rule decoding."""

from __future__ import annotations

import json
import logging
from typing import Any
from unittest.mock import AsyncMock

import asyncpg
import pytest

from reelmatch.shared.enums import AttributeMode
from reelmatch.shared.exceptions import DatabaseError, ProfileDecodeError
from reelmatch.shared.models import AttributeRule
from reelmatch.shared.repository import QualityProfileRepository, _profile_from_row, decode_rule


def _row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": 4,
        "name": "UHD HDR",
        "hdr_settings": {"mode": "required", "values": ["DV", "HDR10"]},
        "video_codec_settings": json.dumps({"mode": "preferred", "values": ["x265"]}),
        "audio_codec_settings": None,
        "audio_channel_settings": "",
        "audio_channels_match_any": True,
        "allowed_qualities": ["Bluray-2160p"],
    }
    row.update(overrides)
    return row


# ── Row conversion ──────────────────────────────────────────────


class TestProfileFromRow:
    def test_decoded_and_text_jsonb(self) -> None:
        profile = _profile_from_row(_row())
        assert profile.id == 4
        assert profile.name == "UHD HDR"
        assert profile.hdr == AttributeRule(mode=AttributeMode.REQUIRED, values=("DV", "HDR10"))
        assert profile.video_codec == AttributeRule(mode=AttributeMode.PREFERRED, values=("x265",))
        assert profile.audio_codec == AttributeRule()
        assert profile.audio_channels == AttributeRule()
        assert profile.audio_channels_match_any is True
        assert profile.allowed_qualities == ("Bluray-2160p",)

    def test_null_columns(self) -> None:
        profile = _profile_from_row(_row(name=None, audio_channels_match_any=None, allowed_qualities=None))
        assert profile.name == ""
        assert profile.audio_channels_match_any is False
        assert profile.allowed_qualities == ()

    def test_allowed_qualities_must_be_list(self) -> None:
        with pytest.raises(ProfileDecodeError):
            _profile_from_row(_row(allowed_qualities={"a": 1}))


class TestDecodeRule:
    def test_empty_inputs(self) -> None:
        assert decode_rule(None) == AttributeRule()
        assert decode_rule("") == AttributeRule()
        assert decode_rule({}) == AttributeRule()

    def test_mode_is_case_insensitive(self) -> None:
        assert decode_rule({"mode": "REQUIRED", "values": ["DV"]}).mode is AttributeMode.REQUIRED

    def test_items_required_wins(self) -> None:
        rule = decode_rule({"items": {"DV": "required", "HDR10": "preferred", "SDR": "notAllowed"}})
        assert rule == AttributeRule(mode=AttributeMode.REQUIRED, values=("DV",))

    def test_items_preferred_only(self) -> None:
        rule = decode_rule(json.dumps({"items": {"Atmos": "preferred", "AAC": "acceptable"}}))
        assert rule == AttributeRule(mode=AttributeMode.PREFERRED, values=("Atmos",))

    def test_items_without_constraints(self) -> None:
        assert decode_rule({"items": {"SDR": "notAllowed", "HDR": "any"}}) == AttributeRule()

    def test_items_not_allowed_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="reelmatch.shared.repository"):
            rule = decode_rule({"items": {"DV": "required", "SDR": "notAllowed"}}, profile_id=5)
        assert rule == AttributeRule(mode=AttributeMode.REQUIRED, values=("DV",))
        assert any("notAllowed value SDR" in r.getMessage() and r.levelno == logging.WARNING for r in caplog.records)

    def test_invalid_json(self) -> None:
        with pytest.raises(ProfileDecodeError):
            decode_rule("{not json")

    def test_unknown_mode(self) -> None:
        with pytest.raises(ProfileDecodeError):
            decode_rule({"mode": "mandatory", "values": []})

    def test_wrong_shapes(self) -> None:
        with pytest.raises(ProfileDecodeError):
            decode_rule(["DV"])
        with pytest.raises(ProfileDecodeError):
            decode_rule({"mode": "required", "values": "DV"})

    def test_decode_error_is_database_error(self) -> None:
        assert issubclass(ProfileDecodeError, DatabaseError)


# ── Repository ──────────────────────────────────────────────────


class TestQualityProfileRepository:
    @pytest.mark.asyncio
    async def test_find_by_id(self) -> None:
        pool = AsyncMock()
        pool.fetchrow.return_value = _row()
        profile = await QualityProfileRepository(pool).find_by_id(4)
        assert profile is not None
        assert profile.id == 4
        args = pool.fetchrow.await_args.args
        assert "FROM quality_profiles" in args[0]
        assert args[1] == 4

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self) -> None:
        pool = AsyncMock()
        pool.fetchrow.return_value = None
        assert await QualityProfileRepository(pool).find_by_id(99) is None

    @pytest.mark.asyncio
    async def test_connection_failure(self) -> None:
        pool = AsyncMock()
        pool.fetchrow.side_effect = OSError("connection refused")
        with pytest.raises(DatabaseError, match="failed to load quality profile 4"):
            await QualityProfileRepository(pool).find_by_id(4)

    @pytest.mark.asyncio
    async def test_postgres_error(self) -> None:
        pool = AsyncMock()
        pool.fetchrow.side_effect = asyncpg.PostgresError("relation does not exist")
        with pytest.raises(DatabaseError):
            await QualityProfileRepository(pool).find_by_id(4)
