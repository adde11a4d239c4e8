"""
MCP search and fetch endpoints.
"""
