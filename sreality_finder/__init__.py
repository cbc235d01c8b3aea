"""
Sreality Finder - search, filter and AI-score Czech real-estate listings.
"""

__version__ = "1.0.0"
