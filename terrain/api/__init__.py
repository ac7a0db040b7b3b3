"""HTTP boundary for the screener."""
