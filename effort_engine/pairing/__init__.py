"""Planned step to executed interval matching."""
