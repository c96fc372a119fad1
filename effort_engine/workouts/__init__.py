"""Planned steps, executed intervals and adherence scoring."""
