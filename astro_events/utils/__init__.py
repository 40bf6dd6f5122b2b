"""
Utility functions module.

Time Semantics:
- Every timestamp crossing a public API must be timezone-aware UTC
- Naive or offset timestamps are rejected, never silently converted
- Time grids are inclusive of both ends of the requested interval
"""
