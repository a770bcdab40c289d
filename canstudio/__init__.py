"""Headless raw CAN frame sender and viewer components for bus simulation."""

__version__ = "0.1.0"
__all__ = ["canrawsender", "canrawview", "newlinemanager", "table", "viewgui", "widgets"]