"""
CapTrack - API Routers
"""
