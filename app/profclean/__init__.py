"""profclean - policy-driven cleanup of stale local user profiles."""

__version__ = "0.1.0"
