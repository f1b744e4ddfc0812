"""Shared pytest fixtures for the reelmatch test suite."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock

import pytest

from reelmatch.config import Settings
from reelmatch.release_parser.parser import ReleaseParser
from reelmatch.shared.enums import AttributeMode
from reelmatch.shared.models import AttributeRule, QualityProfileRules



@pytest.fixture()
def settings() -> Settings:
    """Return a Settings instance with test defaults."""
    return Settings(
        db_host="localhost",
        db_port=5432,
        db_user="test",
        db_password="test",
        db_name="reelmatch_test",
        developer_mode=True,
    )


@pytest.fixture()
def parser() -> ReleaseParser:
    """Parser pinned to a fixed reference year."""
    return ReleaseParser(current_year=2026)


@pytest.fixture()
def hdr_x265_profile() -> QualityProfileRules:
    return QualityProfileRules(
        id=1,
        name="UHD HDR",
        hdr=AttributeRule(mode=AttributeMode.REQUIRED, values=("HDR10", "HDR10+")),
        video_codec=AttributeRule(mode=AttributeMode.REQUIRED, values=("x265",)),
    )


@pytest.fixture()
def dts_hd_profile() -> QualityProfileRules:
    return QualityProfileRules(
        id=2,
        name="DTS-HD Only",
        audio_codec=AttributeRule(mode=AttributeMode.REQUIRED, values=("DTS-HD",)),
    )


@pytest.fixture()
def open_profile() -> QualityProfileRules:
    return QualityProfileRules(id=3, name="Any")


def _profile_row(**overrides: Any) -> dict[str, Any]:
    """Row shaped like ``SELECT ... FROM quality_profiles`` with jsonb as text."""
    row: dict[str, Any] = {
        "id": 1,
        "name": "UHD HDR",
        "hdr_settings": json.dumps({"mode": "required", "values": ["HDR10", "HDR10+"]}),
        "video_codec_settings": json.dumps({"mode": "required", "values": ["x265"]}),
        "audio_codec_settings": None,
        "audio_channel_settings": None,
        "audio_channels_match_any": False,
        "allowed_qualities": json.dumps([]),
    }
    row.update(overrides)
    return row


@pytest.fixture()
def mock_pool() -> AsyncMock:
    """Mock asyncpg pool returning the default profile row."""
    pool = AsyncMock()
    pool.fetchrow = AsyncMock(return_value=_profile_row())
    return pool


@pytest.fixture()
def make_profile_row():
    """Factory for quality_profiles rows with column overrides."""
    return _profile_row
