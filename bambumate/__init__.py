"""BambuMate tuning core.

Flattens Bambu Studio filament profile inheritance chains and turns detected
print defects into material-safe parameter recommendations.
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
