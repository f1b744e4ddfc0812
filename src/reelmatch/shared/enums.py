"""Domain enumerations used across all modules."""

from __future__ import annotations

from enum import Enum, unique


@unique
class AttributeMode(str, Enum):
    """Strength of a quality-profile rule for one attribute dimension."""

    REQUIRED = "required"
    PREFERRED = "preferred"
    NONE = "none"


@unique
class Dimension(str, Enum):
    """Attribute dimensions a profile can constrain.

    The value is the human-readable name used in mismatch reasons.
    """

    HDR = "HDR format"
    VIDEO_CODEC = "video codec"
    AUDIO_CODEC = "audio codec"
    AUDIO_CHANNELS = "audio channels"

    @property
    def label(self) -> str:
        """Short prefix used when listing rejection reasons."""
        return _LABELS[self]

    @property
    def is_sequence(self) -> bool:
        """Sequence dimensions match on any-overlap, scalar ones on membership."""
        return self in (Dimension.HDR, Dimension.AUDIO_CODEC)


_LABELS = {
    Dimension.HDR: "HDR",
    Dimension.VIDEO_CODEC: "Video",
    Dimension.AUDIO_CODEC: "Audio",
    Dimension.AUDIO_CHANNELS: "Channels",
}
