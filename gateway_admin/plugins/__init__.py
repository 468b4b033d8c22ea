"""Plugin schema lookup."""
