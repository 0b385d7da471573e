"""
Image Colors Extraction Module

Provides stride sampling, quantized frequency counting, averaging and
palette swatch derivation over decoded RGBA pixel grids.
"""

__version__ = "1.0.0"
