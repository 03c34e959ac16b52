"""themeguard — structural checks for compiled design-token themes."""

__version__ = "0.3.0"
