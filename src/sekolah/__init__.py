"""Sekolah - access control for the school administration application."""

__version__ = "0.1.0"
