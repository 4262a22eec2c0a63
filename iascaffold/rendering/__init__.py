"""Rendering engine and output helpers."""
