"""
streamresolver - resolves playable streams for movies and episodes from
pluggable upstream providers.
"""

__version__ = "1.0.0"
