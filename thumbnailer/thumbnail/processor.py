"""
Thumbnail processor — decode, resize to a fixed width, re-encode.

Uses Pillow for image manipulation. The output is always exactly
``target_width`` pixels wide; the height follows the source aspect ratio:

    divisor    = original_width // target_width      (floor, at least 1)
    new_height = round(original_height / divisor)    (half-to-even, at least 1)

Sources narrower than the target would floor the divisor to 0. The divisor is
clamped to 1 instead, so such sources are stretched to ``target_width`` and
keep their original height (200x150 at width 480 becomes 480x150).
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from thumbnailer.exceptions import DecodeError, EncodeError
from thumbnailer.thumbnail.constants import SAVE_OPTIONS, SAVEABLE_MODES, EncodingKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thumbnail:
    data: bytes
    width: int
    height: int
    kind: EncodingKind

    @property
    def content_type(self) -> str | None:
        return self.kind.content_type


def compute_divisor(original_width: int, target_width: int) -> int:
    if target_width <= 0:
        raise ValueError("target_width must be positive")
    return max(original_width // target_width, 1)


def compute_target_size(original_width: int, original_height: int, target_width: int) -> tuple[int, int]:
    """Return the ``(width, height)`` of the thumbnail for a source size."""
    divisor = compute_divisor(original_width, target_width)
    new_height = max(round(original_height / divisor), 1)
    return target_width, new_height


class ThumbnailProcessor:
    """Process a single source image into a fixed-width thumbnail."""

    def __init__(self, image_data: bytes) -> None:
        if not image_data:
            raise DecodeError("The source blob is empty.")
        try:
            image = Image.open(io.BytesIO(image_data))
            image.load()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            EOFError,
            SyntaxError,
            ValueError,
        ) as exc:
            raise DecodeError(f"The source blob is not a readable image: {exc}") from exc
        self._image = image

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    def render(self, target_width: int, kind: EncodingKind) -> Thumbnail:
        """Resize to ``target_width`` and encode as ``kind``."""
        if not kind.is_supported:
            raise EncodeError(f"No encoder for {kind.value}.")

        width, height = compute_target_size(*self._image.size, target_width)
        buf = io.BytesIO()
        try:
            resized = self._prepare(kind).resize((width, height), Image.LANCZOS)
            resized.save(buf, format=kind.value, **SAVE_OPTIONS[kind])
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"Could not encode thumbnail as {kind.value}: {exc}") from exc

        logger.debug(
            "Rendered %sx%s -> %sx%s %s",
            self._image.width, self._image.height, width, height, kind.value,
        )
        return Thumbnail(data=buf.getvalue(), width=width, height=height, kind=kind)

    def _prepare(self, kind: EncodingKind) -> Image.Image:
        """Convert to a mode the target writer accepts."""
        img = self._image
        if img.mode in SAVEABLE_MODES[kind]:
            return img
        if img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info):
            # Composite onto white background for formats without alpha
            rgba = img.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            return background
        return img.convert("RGB")


def create_thumbnail(image_data: bytes, target_width: int, kind: EncodingKind) -> Thumbnail:
    """Decode ``image_data`` and return it re-encoded at ``target_width``."""
    return ThumbnailProcessor(image_data).render(target_width, kind)
