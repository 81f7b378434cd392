# dfa_designer/ui/graphics/interaction.py
"""
The single pointer gesture that currently owns the canvas.

A session is opened by one of the orchestrator's begin_* calls and closed by
the matching end_* call. While it is open every other interactive item is
disabled, so no second gesture can start.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Optional


class InteractionError(RuntimeError):
    """Raised when sessions are opened or closed out of order."""
    pass


class InteractionKind(Enum):
    STATE_MOVE = auto()
    CURVATURE_EDIT = auto()
    NEW_TRANSITION = auto()


@dataclass
class InteractionSession:
    kind: InteractionKind
    owner: Any


class InteractionState:
    """Holds at most one active session."""

    def __init__(self):
        self._session: Optional[InteractionSession] = None

    @property
    def session(self) -> Optional[InteractionSession]:
        return self._session

    def is_active(self, kind: Optional[InteractionKind] = None) -> bool:
        if self._session is None:
            return False
        return kind is None or self._session.kind == kind

    def begin(self, kind: InteractionKind, owner: Any) -> InteractionSession:
        if self._session is not None:
            raise InteractionError(
                f"Cannot start {kind.name}: {self._session.kind.name} session is still active"
            )
        self._session = InteractionSession(kind, owner)
        return self._session

    def end(self, kind: InteractionKind) -> InteractionSession:
        if self._session is None or self._session.kind != kind:
            active = self._session.kind.name if self._session else "no"
            raise InteractionError(f"Cannot end {kind.name}: {active} session is active")
        session, self._session = self._session, None
        return session
