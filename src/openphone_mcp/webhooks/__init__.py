"""
OpenPhone webhook receiver.
"""
