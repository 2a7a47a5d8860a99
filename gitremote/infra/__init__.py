"""
Infrastructure layer for gitremote.

Contains the execution environments git runs in:
- ContainerBase: git inside a throwaway container
- LocalBase: git on the host
- ExecHandle: a prepared command whose stdout can be captured

These provide clean interfaces that can be swapped or mocked for testing.
"""

from .base import (
    ContainerBase,
    ExecHandle,
    GitBase,
    LocalBase,
    default_base,
    DEFAULT_IMAGE,
    DEFAULT_RUNTIME,
)

__all__ = [
    'ContainerBase',
    'ExecHandle',
    'GitBase',
    'LocalBase',
    'default_base',
    'DEFAULT_IMAGE',
    'DEFAULT_RUNTIME',
]
