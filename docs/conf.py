"""Sphinx configuration for the UltiTrack scorekeeper documentation."""

from __future__ import annotations

import os
import sys
from datetime import datetime

# Make the repository root importable so autodoc can find ``ultitrack``.
PROJECT_ROOT = os.path.abspath(os.path.join(__file__, "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

project = "UltiTrack Live Scorekeeper"
author = "WelshDragon"
copyright = f"{datetime.now():%Y}, {author}"

try:
    from importlib.metadata import version as _dist_version

    version = _dist_version("ultitrack")
except Exception:  # pragma: no cover - building from a plain checkout
    version = "0.1.0"
release = version

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

autosummary_generate = True
master_doc = "index"

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "sphinx_rtd_theme"

# Signatures stay short; type hints are listed alongside each parameter.
autodoc_typehints = "description"
autodoc_mock_imports = ["pygame"]
napoleon_google_docstring = False
napoleon_numpy_docstring = True
