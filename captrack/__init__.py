"""
CapTrack - capitalizable development time tracking.
"""

__version__ = "0.1.0"
