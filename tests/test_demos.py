# tests/test_demos.py
from dfa_designer.demos import build_cycle_graph, build_petersen_graph


def test_cycle_graph(orchestrator):
    states = build_cycle_graph(orchestrator)
    assert [s.get_name() for s in states] == [f"Q{i}" for i in range(8)]
    assert len(orchestrator.committed_transitions()) == 8
    assert (states[0].config.x, states[0].config.y) == (640, 340)
    assert (states[2].config.x, states[2].config.y) == (340, 640)
    for i, transition in enumerate(orchestrator.transitions()):
        assert transition.start_state is states[i]
        assert transition.end_state is states[(i + 1) % 8]
        assert (transition.start_index, transition.end_index) == (0, 6)


def test_cycle_graph_custom_size(orchestrator):
    states = build_cycle_graph(orchestrator, count=3, radius=200)
    assert len(states) == 3
    assert len(orchestrator.transitions()) == 3


def test_petersen_graph(orchestrator):
    states = build_petersen_graph(orchestrator)
    assert [s.get_name() for s in states] == [f"Q{i}" for i in range(10)]
    transitions = orchestrator.committed_transitions()
    assert len(transitions) == 15

    degree = {state: 0 for state in states}
    for transition in transitions:
        degree[transition.start_state] += 1
        degree[transition.end_state] += 1
    assert set(degree.values()) == {3}

    inner = states[5:]
    inner_edges = [(t.start_state, t.end_state) for t in transitions
                   if t.start_state in inner and t.end_state in inner]
    assert (inner[0], inner[2]) in inner_edges
    assert (inner[4], inner[1]) in inner_edges


def test_demo_states_fit_the_canvas(orchestrator):
    for state in build_petersen_graph(orchestrator):
        center = state.get_center_point()
        assert 0 <= center.x - state.config.r and center.x + state.config.r <= 750
        assert 0 <= center.y - state.config.r and center.y + state.config.r <= 750
