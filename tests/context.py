"""Make the package under test importable without installing it."""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import gotriage  # noqa: E402, F401
