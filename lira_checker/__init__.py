"""Lira Checker: currency status and conversion service."""

__version__ = "0.1.0"
