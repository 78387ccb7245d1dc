"""Subway-map style service topology renderer."""

__version__ = "0.1.0"
