"""ttrak - terminal task tracker with GitHub and Linear sync."""

__version__ = "0.1.0"
