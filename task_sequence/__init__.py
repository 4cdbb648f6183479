"""Task sequence event estimation package."""

__version__ = "0.1.0"
