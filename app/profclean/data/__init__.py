"""Bundled data files for profclean."""
