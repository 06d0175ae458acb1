"""
File discovery, loading and configuration helpers.
"""
