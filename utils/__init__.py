"""
Utility modules for the Fair Slot Finder
"""

from .logger import SlotFinderLogger
from .validators import RequestValidator, DataSanitizer
from .meeting_logger import MeetingLogger

__all__ = ['SlotFinderLogger', 'RequestValidator', 'DataSanitizer', 'MeetingLogger']
