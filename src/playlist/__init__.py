"""Cache-backed playlist traversal.

This module resolves playlist items from the local cache first and
pages through the remote source only for indices the cache lacks.
"""
