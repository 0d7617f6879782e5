"""
Constants used internally by the image stitcher.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

# Output encoding
MIME_TYPES: dict[str, str] = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}
PIL_FORMATS: dict[str, str] = {
    "png": "PNG",
    "jpeg": "JPEG",
    "webp": "WEBP",
}
LOSSY_FORMATS = frozenset({"jpeg", "webp"})
QUALITY_MIN = 1
QUALITY_MAX = 100

# Intermediate format used for resized sources (lossless, keeps alpha)
INTERMEDIATE_FORMAT = "PNG"

# Canvas pixel layout
COLOR_MODE_RGBA = "RGBA"
COLOR_MODE_RGB = "RGB"
CANVAS_CHANNELS = 4

# Background colors as (r, g, b, alpha) with alpha in [0.0, 1.0]
TRANSPARENT_KEYWORD = "transparent"
COLOR_TRANSPARENT = (0, 0, 0, 0.0)
COLOR_FALLBACK = (255, 255, 255, 1.0)
HEX_RGB_LENGTH = 6
HEX_RGBA_LENGTH = 8
ALPHA_MAX = 255

# Key list parsing
KEY_SEPARATOR_PATTERN = r"\r?\n|,"

# File name used for the binary artifact when no destination key is set
DEFAULT_FILE_STEM = "stitched"

# Object store
DEFAULT_REGION = "us-east-1"
NOT_FOUND_ERROR_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "404"})
ACCESS_KEY_ENV = "IMAGE_STITCHER_ACCESS_KEY"
SECRET_KEY_ENV = "IMAGE_STITCHER_SECRET_KEY"
