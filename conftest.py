"""Pytest configuration.

Ensures that the repository root is importable so that ``dynamic_island`` can
be resolved when tests are executed without an editable install, and keeps
the package log file out of the working tree.
"""

import os
import sys
import tempfile
from pathlib import Path

# Add the repository root (the directory containing this file) to ``sys.path``
# if it is not already present.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be set before ``dynamic_island.watchers.logger`` is first imported.
os.environ.setdefault(
    "ISLAND_LOG_DIR",
    str(Path(tempfile.gettempdir()) / "dynamic_island_tests"),
)
