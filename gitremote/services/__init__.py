"""
Service layer for gitremote.

Contains logic that coordinates resolvers across many repositories:
- ResolveService: Batch default-branch / latest-tag resolution

Services are the primary API for commands to use.
"""

from .resolve_service import ResolveService, ResolveOptions

__all__ = [
    'ResolveService',
    'ResolveOptions',
]
