"""
CapTrack - Services
"""
