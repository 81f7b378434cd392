# examples/petersen_graph.py
"""The Petersen graph: ten states, fifteen transitions."""

import sys

from dfa_designer.app import run_demo
from dfa_designer.demos import build_petersen_graph


if __name__ == "__main__":
    sys.exit(run_demo(build_petersen_graph, "Petersen Graph"))
