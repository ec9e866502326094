import sys
from pathlib import Path

# Let the suite import guessmeter from a plain checkout without installing it.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if SRC_DIR.is_dir() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))
