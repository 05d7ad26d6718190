"""Geometry, rigid-body math, homographies and grayscale images for fiducial tags."""

__version__ = "0.1.0"