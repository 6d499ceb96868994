"""HTTP layer for the tuning core."""
