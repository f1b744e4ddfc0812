#!/usr/bin/env python3
"""Insert development quality profiles into the database."""

from __future__ import annotations

import asyncio
import json
import logging

import asyncpg

from reelmatch.config import get_settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

# name -> (hdr, video codec, audio codec, audio channels, allowed tiers)
DEV_PROFILES: dict[str, tuple[dict, dict, dict, dict, list[str]]] = {
    "Any": ({}, {}, {}, {}, []),
    "UHD HDR": (
        {"mode": "required", "values": ["DV", "HDR10", "HDR10+"]},
        {"mode": "required", "values": ["x265"]},
        {"mode": "preferred", "values": ["TrueHD", "Atmos", "DTS-HD"]},
        {"mode": "preferred", "values": ["7.1"]},
        ["Bluray-2160p", "Remux-2160p", "WEBDL-2160p"],
    ),
    "HD Compact": (
        {},
        {"mode": "preferred", "values": ["x265"]},
        {"mode": "none", "values": []},
        {"mode": "required", "values": ["2.0", "5.1"]},
        ["WEBDL-1080p", "Bluray-1080p", "WEBDL-720p"],
    ),
    # Stored in the per-item format; decodes to required DV.
    "Dolby Vision Only": (
        {"items": {"DV": "required", "HDR10": "preferred", "SDR": "notAllowed"}},
        {},
        {},
        {},
        [],
    ),
}


async def seed(dsn: str) -> None:
    conn: asyncpg.Connection = await asyncpg.connect(dsn)
    try:
        for name, (hdr, video, audio, channels, allowed) in DEV_PROFILES.items():
            await conn.execute(
                """
                INSERT INTO quality_profiles (name, hdr_settings, video_codec_settings,
                                              audio_codec_settings, audio_channel_settings,
                                              allowed_qualities)
                VALUES ($1, $2::jsonb, $3::jsonb, $4::jsonb, $5::jsonb, $6::jsonb)
                ON CONFLICT (name) DO NOTHING
                """,
                name,
                json.dumps(hdr),
                json.dumps(video),
                json.dumps(audio),
                json.dumps(channels),
                json.dumps(allowed),
            )
        logger.info("seeded %d quality profile(s)", len(DEV_PROFILES))
    finally:
        await conn.close()


def main() -> None:
    asyncio.run(seed(get_settings().dsn))


if __name__ == "__main__":
    main()
