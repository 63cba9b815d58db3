"""Output choices shared by the CLI, preferences and API payloads.

Keeping them in the domain layer lets the config validator and the typer
options agree on a single list of accepted values.
"""

from __future__ import annotations

from enum import Enum


class _Choice(str, Enum):
    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, value: str) -> "_Choice":
        """Case-sensitive lookup with an error listing the accepted values."""

        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"must be one of: {', '.join(cls.values())}") from None


class ImageFormat(_Choice):
    """Image extensions Memegen can render."""

    JPG = "jpg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"

    @classmethod
    def default(cls) -> "ImageFormat":
        return cls.JPG


class Layout(_Choice):
    """Text placement on the template."""

    DEFAULT = "default"
    TOP = "top"

    @classmethod
    def default(cls) -> "Layout":
        return cls.DEFAULT


class ColorMode(_Choice):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"
