"""
Thumbnail — static constants and enum types.
"""
import enum


class EncodingKind(str, enum.Enum):
    """Output encodings the thumbnailer can produce."""
    PNG = "PNG"
    JPEG = "JPEG"
    GIF = "GIF"
    UNSUPPORTED = "UNSUPPORTED"

    @property
    def is_supported(self) -> bool:
        return self is not EncodingKind.UNSUPPORTED

    @property
    def content_type(self) -> str | None:
        return CONTENT_TYPES.get(self)


class ResultStatus(str, enum.Enum):
    SKIPPED = "SKIPPED"
    WRITTEN = "WRITTEN"


# Normalised file extension -> encoding. Adding a format is one entry here.
EXTENSION_ENCODINGS: dict[str, EncodingKind] = {
    "png": EncodingKind.PNG,
    "jpg": EncodingKind.JPEG,
    "jpeg": EncodingKind.JPEG,
    "gif": EncodingKind.GIF,
}

CONTENT_TYPES: dict[EncodingKind, str] = {
    EncodingKind.PNG: "image/png",
    EncodingKind.JPEG: "image/jpeg",
    EncodingKind.GIF: "image/gif",
}

# Pillow encoder options per output format
SAVE_OPTIONS: dict[EncodingKind, dict] = {
    EncodingKind.PNG: {},
    EncodingKind.JPEG: {"quality": 85},
    EncodingKind.GIF: {},
}

# Modes each Pillow writer accepts without conversion
SAVEABLE_MODES: dict[EncodingKind, frozenset[str]] = {
    EncodingKind.PNG: frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}),
    EncodingKind.JPEG: frozenset({"1", "L", "RGB", "CMYK"}),
    EncodingKind.GIF: frozenset({"1", "L", "P", "RGB", "RGBA"}),
}
