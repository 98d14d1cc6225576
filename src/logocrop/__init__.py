"""logocrop: rotate-and-crop pipeline for logo and avatar uploads."""

__version__ = "0.1.0"
