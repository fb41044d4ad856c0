"""Core engine of profclean.

Selection policies, the deletion loop, the decision log, and the
configuration, path and theme plumbing around them.
"""
