"""Embedded cache storage layer.

This module persists playlist lengths and individual playlist items
in an ordered key-value store so repeated traversals stay local.
"""
