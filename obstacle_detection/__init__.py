"""Occupancy-grid obstacle segmentation and shape classification."""

__version__ = "0.1.0"
