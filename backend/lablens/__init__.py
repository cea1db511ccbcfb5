"""LabLens - deterministic lab panel analysis."""

__version__ = "0.1.0"
