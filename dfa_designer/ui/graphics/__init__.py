# dfa_designer/ui/graphics/__init__.py
"""Graphics items and the orchestrator that owns them."""

from .interaction import InteractionError, InteractionKind, InteractionSession
from .pointer import PointerEvent
from .render_orchestrator import DiagramCanvas, DiagramScene, RenderOrchestrator
from .state_view import StateView, StateViewConfig
from .transition_view import TransitionPhase, TransitionView

__all__ = [
    "InteractionError",
    "InteractionKind",
    "InteractionSession",
    "PointerEvent",
    "DiagramCanvas",
    "DiagramScene",
    "RenderOrchestrator",
    "StateView",
    "StateViewConfig",
    "TransitionPhase",
    "TransitionView",
]
