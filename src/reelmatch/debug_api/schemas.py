"""Request bodies for the slot debug endpoints."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ParseReleaseInput(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    release_title: str


class ProfileMatchInput(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    release_title: str
    quality_profile_id: int
