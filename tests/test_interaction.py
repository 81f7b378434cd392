# tests/test_interaction.py
import dataclasses

import pytest

from dfa_designer.ui.graphics.interaction import InteractionError, InteractionKind, InteractionState


def test_single_session():
    state = InteractionState()
    assert not state.is_active()

    session = state.begin(InteractionKind.STATE_MOVE, "owner")
    assert state.session is session
    assert state.is_active()
    assert state.is_active(InteractionKind.STATE_MOVE)
    assert not state.is_active(InteractionKind.NEW_TRANSITION)

    with pytest.raises(InteractionError):
        state.begin(InteractionKind.CURVATURE_EDIT, "other")
    with pytest.raises(InteractionError):
        state.end(InteractionKind.CURVATURE_EDIT)

    assert state.end(InteractionKind.STATE_MOVE) is session
    assert state.session is None
    with pytest.raises(InteractionError):
        state.end(InteractionKind.STATE_MOVE)


def test_session_holds_kind_and_owner():
    session = InteractionState().begin(InteractionKind.CURVATURE_EDIT, "owner")
    assert [f.name for f in dataclasses.fields(session)] == ["kind", "owner"]
    assert session.kind == InteractionKind.CURVATURE_EDIT
    assert session.owner == "owner"
