"""Shared default values for user-facing configuration settings."""
from image_stitcher.type_defs import Alignment, OutputFormat

# Request
DEFAULT_SPACING = 0
DEFAULT_ALIGNMENT: Alignment = "left"
DEFAULT_NORMALIZE_WIDTH = True
DEFAULT_TARGET_WIDTH = 0  # 0 selects the widest source
DEFAULT_ALLOW_UPSCALE = True
DEFAULT_BACKGROUND_COLOR = "transparent"
DEFAULT_FORMAT: OutputFormat = "png"
DEFAULT_QUALITY = 80
DEFAULT_OUTPUT_BINARY = True
DEFAULT_BINARY_PROPERTY = "data"

# Object store
DEFAULT_ENDPOINT = "127.0.0.1"
DEFAULT_PORT = 9000
DEFAULT_USE_SSL = False

# Processing
DEFAULT_CONTINUE_ON_FAIL = False
DEFAULT_FETCH_WORKERS = 1
DEFAULT_STRICT_COLORS = False

# Output
DEFAULT_OUTPUT_DIR = "out"
DEFAULT_WRITE_BINARY = True
