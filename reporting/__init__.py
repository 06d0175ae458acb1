"""
Text, JSON and HTML rendering of analysis results.
"""
