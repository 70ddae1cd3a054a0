"""
Root conftest.py for pytest configuration.
Adds the package src directory to the Python path so tests run from a checkout.
"""
import sys
from pathlib import Path

# Get the project root directory
PROJECT_ROOT = Path(__file__).parent

src_path = str((PROJECT_ROOT / "src").absolute())
if src_path not in sys.path:
    sys.path.insert(0, src_path)
