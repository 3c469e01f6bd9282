"""
Deadline Kernel

A jurisdiction-aware deadline calculation core with:
- Calendar, business-day and court-day counting
- Full per-day audit trail for every calculation
- Append-only persistence of saved calculations
- Federal holiday generation for seeding holiday stores
"""

__version__ = "0.1.0"
