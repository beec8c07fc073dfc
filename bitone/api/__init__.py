"""
HTTP API for Bitone.
"""
