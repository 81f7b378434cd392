# examples/cycle_graph.py
"""
Eight states on a ring, each connected to the next.

Drag states around, hover a transition to bend it, or press a mount point and
release it over another state's mount point to draw a new transition.
"""

import sys

from dfa_designer.app import run_demo
from dfa_designer.demos import build_cycle_graph


if __name__ == "__main__":
    sys.exit(run_demo(build_cycle_graph, "Cycle Graph"))
