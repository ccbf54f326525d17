"""Block-mapping flash translation layer over a file-backed flash image."""

__version__ = "0.1.0"
__all__ = ["cli", "device", "ftl", "geometry"]