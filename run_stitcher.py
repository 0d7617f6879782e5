"""
run_stitcher.py - CLI Entry Point

Forwards execution to the CLI defined in `src/image_stitcher/cli.py`
so the tool runs from a checkout without installing the package.

Usage:
    python run_stitcher.py --config stitcher.toml --source-bucket scans --source-keys "a.png,b.png"

For help on available options, run:
    python run_stitcher.py --help
"""
import sys
# Source code in src/ subdirectory
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import image_stitcher.cli as stitch_cli

if __name__ == "__main__":
    sys.exit(stitch_cli.main())
