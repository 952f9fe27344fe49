"""
Gig Guide - directory and booking API for artists, organisers, venues and events
"""

__version__ = "0.1.0"
