"""
Image Colors

Extracts average, dominant and palette swatch colors from decoded images.
"""

__version__ = "1.0.0"
