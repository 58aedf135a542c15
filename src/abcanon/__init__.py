"""Canonical class assignment for antibody CDRs (abcanon)."""

from pathlib import Path

__version__ = "0.1.0"

# Sphinx autodoc shows the package docstring on the API index page; use the
# README there when running from a source checkout
_readme = Path(__file__).resolve().parents[2] / "README.md"
if _readme.is_file():
    __doc__ = _readme.read_text(encoding="utf-8")
