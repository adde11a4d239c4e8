"""
OpenPhone tool endpoints.
"""
