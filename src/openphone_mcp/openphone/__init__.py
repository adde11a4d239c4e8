"""
OpenPhone API integration.

Keep package import side-effects to a minimum; import the client module directly.
"""

__all__ = ["client"]
