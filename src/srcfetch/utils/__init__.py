"""Utility helpers for srcfetch."""
