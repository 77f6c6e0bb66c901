"""depo-client — dependency manifest editor state controller."""

__version__ = "0.1.0"
