"""Release preparation and image tag expansion."""

__version__ = "0.1.0"
