"""Viewer for multi-agent path finding plans on grid maps."""

__version__ = "0.1.0"