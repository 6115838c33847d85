"""
Core app: health checks and shared formatting helpers.
"""
