"""Domain models.

Plain, strict data structures (Pydantic v2). The domain knows nothing about
HTTP, the CLI or the BCH library.
"""
