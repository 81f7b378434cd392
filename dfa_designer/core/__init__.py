# dfa_designer/core/__init__.py
"""Qt-free building blocks: geometry, the event publisher and the DFA model."""

from .dfa import Dfa, DfaError, SimulationStep
from .event_publisher import EventPublisher
from .geometry import Point

__all__ = [
    "Dfa",
    "DfaError",
    "SimulationStep",
    "EventPublisher",
    "Point",
]
