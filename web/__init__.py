"""
Flask front end for the analysis engine.
"""
