"""
WeeklyKeeper - Source Package

A personal weekly timesheet and meal-subsidy expense tracker.

DESIGN PRINCIPLES:
1. The settlement engine is pure: it reads a week, it never mutates one
2. Global settings seed new weeks, they never rewrite old ones
3. Money is summed at full precision, rounded only for display
4. Local persistence is the source of truth, remote sync is best effort
5. Storage and sync transports are swappable
"""

__version__ = "1.0.0"
__author__ = "WeeklyKeeper Team"
