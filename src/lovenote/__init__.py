"""Pressable heart greeting card driven by reactive pointer streams."""

__version__ = "0.1.0"
