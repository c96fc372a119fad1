"""Session performance reports."""
