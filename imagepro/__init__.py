"""Image files (PGM, PPM, RAW, BMP) with point, region, morphology, geometry and warping operations."""

__version__ = "0.1.0"