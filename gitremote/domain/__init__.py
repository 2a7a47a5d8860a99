"""
Domain objects for gitremote.

Plain result types with no behaviour beyond serialization.
"""

from .resolution import ResolutionStatus, RepoResolution, ResolutionSummary

__all__ = [
    'ResolutionStatus',
    'RepoResolution',
    'ResolutionSummary',
]
