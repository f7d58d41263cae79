"""Release and image services."""
