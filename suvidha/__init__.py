"""SUVIDHA utility services kiosk backend."""

__version__ = "0.1.0"
