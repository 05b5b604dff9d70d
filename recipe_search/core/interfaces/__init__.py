"""
Core interfaces module for recipe search.

This module provides access to all core interfaces used throughout
the application.
"""

from .backend_interface import BackendPage, RawFacets, SearchBackendInterface
from .repository_interface import RecipeRepositoryInterface
from .sink_interface import InstrumentationSinkInterface

__all__ = [
    'BackendPage',
    'RawFacets',
    'SearchBackendInterface',
    'RecipeRepositoryInterface',
    'InstrumentationSinkInterface'
]
