"""
CapTrack - Pydantic Schemas
"""
