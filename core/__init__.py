"""
Core analysis engine: class extraction, usage scanning and classification.
"""
