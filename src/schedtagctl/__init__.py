"""schedtagctl: dynamic scheduling tags for infrastructure resources."""

__version__ = "0.1.0"
