"""Utility helpers for the modresolve CLI."""
