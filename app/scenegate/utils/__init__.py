"""Utility modules for scenegate."""
