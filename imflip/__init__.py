"""Flip 24-bit BMP images serially, with threads, or over row-partitioned ranks; estimate pi."""

__version__ = "0.1.0"

__all__ = ["bmp", "flip", "distributed", "cli", "pi"]