"""
conftest.py
-----------
Pytest configuration: puts the project root on sys.path so the tests can
import main.py, and forces a headless matplotlib backend.
"""

import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

os.environ.setdefault("MPLBACKEND", "Agg")
