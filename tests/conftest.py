"""pytest configuration for Deep Signal Platform."""

import sys
from pathlib import Path

# Put src/ on sys.path for absolute imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))
