"""Shared utilities for gitfrisky."""
