"""Utility helpers for PhotoEdit."""
