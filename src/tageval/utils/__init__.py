"""Shared helpers: typed errors, logging and span arithmetic."""
