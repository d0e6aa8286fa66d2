"""
Backend package for the enclosures company website.

This package provides a FastAPI application serving blog posts, products,
a two-level service catalogue, contact messages and uploaded media, with
interchangeable in-memory, object-storage and relational content stores.
"""
