"""
CapTrack - Utilities
"""
