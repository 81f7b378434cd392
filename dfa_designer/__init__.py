# dfa_designer/__init__.py
"""Interactive editor for deterministic finite automaton diagrams."""

from .utils.config import APP_VERSION

__version__ = APP_VERSION
