"""Document store layer.

This package names endpoint collections, wraps the MongoDB driver,
and exposes the SDK used to write and read cached feed records.
"""
