# dfa_designer/demos.py
"""Ready-made diagrams used by the example scripts."""

import logging
import math
from typing import List

from .core.geometry import Point, snap
from .ui.graphics.render_orchestrator import RenderOrchestrator
from .ui.graphics.state_view import StateView

logger = logging.getLogger(__name__)

# Offset between a ring position and the config x/y of the state placed on it.
PLACEMENT_OFFSET = 35
PLACEMENT_STEP = 10


def _ring_position(center: Point, radius: float, index: int, count: int) -> Point:
    angle = index * 2 * math.pi / count
    x = center.x + radius * math.cos(angle)
    y = center.y + radius * math.sin(angle)
    return Point(snap(x - PLACEMENT_OFFSET, PLACEMENT_STEP), snap(y - PLACEMENT_OFFSET, PLACEMENT_STEP))


def _add_ring(orchestrator: RenderOrchestrator, radius: float, count: int, first_number: int) -> List[StateView]:
    width, height = orchestrator.canvas_size()
    center = Point(width / 2, height / 2)
    states = []
    for i in range(count):
        position = _ring_position(center, radius, i, count)
        states.append(orchestrator.add_state_from_config(name=f"Q{first_number + i}", x=position.x, y=position.y))
    return states


def build_cycle_graph(orchestrator: RenderOrchestrator, count: int = 8, radius: float = 300) -> List[StateView]:
    """Places `count` states on a ring and connects each one to the next."""
    states = _add_ring(orchestrator, radius, count, 0)
    for i, state in enumerate(states):
        orchestrator.add_transition(state, states[(i + 1) % count])
    logger.info("Built cycle graph with %d states", count)
    return states


def build_petersen_graph(orchestrator: RenderOrchestrator) -> List[StateView]:
    """
    The Petersen graph: an outer pentagon Q0..Q4, an inner pentagram Q5..Q9
    and a spoke from every outer state to its inner partner.
    """
    outer = _add_ring(orchestrator, 300, 5, 0)
    inner = _add_ring(orchestrator, 150, 5, 5)

    for i in range(5):
        orchestrator.add_transition(outer[i], outer[(i + 1) % 5])
    for i in range(5):
        orchestrator.add_transition(outer[i], inner[i])
    for i in range(5):
        orchestrator.add_transition(inner[i], inner[(i + 2) % 5])

    logger.info("Built Petersen graph")
    return outer + inner
