"""
Bitone - black and white image dithering.
"""

__version__ = "0.1.0"
