"""
Processors for bulk importing address data.
"""

from .address import AddressImportProcessor
from .error_tracker import ErrorTracker

__all__ = ['AddressImportProcessor', 'ErrorTracker']
