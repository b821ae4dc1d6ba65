"""
Fair Slot Finder - multi-participant meeting slot search

This package provides a scheduling engine that:
- Finds half-hour-aligned slots where every calendar is free
- Keeps every participant and respected timezone inside reasonable working hours
- Drafts outreach messages and calendar holds for the slots a person picks
"""

__version__ = "1.0.0"
__author__ = "Fair Slot Finder Team"
