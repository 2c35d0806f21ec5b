"""Calibration and analysis steps for fragment-separator detectors."""

__version__ = "0.1.0"

__all__ = [
    "anapar",
    "analysis",
    "calibration",
    "seetrampar",
    "seetram",
    "spill",
    "mw",
]