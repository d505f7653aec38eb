"""Utility helpers for multicrop."""
