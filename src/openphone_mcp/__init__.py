"""
OpenPhone MCP adapter service.
"""

__version__ = "1.0.0"
