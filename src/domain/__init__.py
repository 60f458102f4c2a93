"""Tidefinder domain layer - pure catalog logic with no I/O."""
