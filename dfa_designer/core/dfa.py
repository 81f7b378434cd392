# dfa_designer/core/dfa.py
"""
Deterministic finite automaton model.

The diagram editor only visualises this structure; it never reads or writes it.
Every mutator validates its arguments and raises DfaError straight to the
caller, which is responsible for showing the problem to the user.
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)

TransitionTable = Dict[str, Dict[str, str]]


class DfaError(ValueError):
    """Raised when an operation references unknown or conflicting DFA data."""
    pass


@dataclass(frozen=True)
class SimulationStep:
    """One consumed input symbol. `next_state` is None when no transition exists."""
    state: str
    symbol: str
    next_state: Optional[str]


class Dfa:
    def __init__(self, states: Iterable[str], alphabet: Iterable[str],
                 transition_table: Mapping[str, Mapping[str, str]],
                 start_state: str, accept_states: Iterable[str]):
        self._states: Set[str] = set(states)
        self._alphabet: Set[str] = set(alphabet)
        self._transition_table: TransitionTable = {
            state: dict(row) for state, row in transition_table.items()
        }
        self._start_state = start_state
        self._accept_states: Set[str] = set(accept_states)

        for from_state, row in self._transition_table.items():
            self._require_state(from_state)
            for symbol, next_state in row.items():
                self._require_symbol(symbol)
                self._require_state(next_state)

        if start_state not in self._states:
            raise DfaError(f"Start state {start_state} not in states")

        for accept_state in self._accept_states:
            if accept_state not in self._states:
                raise DfaError(f"Accept state {accept_state} not in states")

    # --- Validation helpers ---

    def _require_state(self, state: str):
        if state not in self._states:
            raise DfaError(f"State {state} not in states")

    def _require_symbol(self, symbol: str):
        if symbol not in self._alphabet:
            raise DfaError(f"Symbol {symbol} not in alphabet")

    # --- Read access ---

    @property
    def states(self) -> Set[str]:
        return set(self._states)

    @property
    def alphabet(self) -> Set[str]:
        return set(self._alphabet)

    @property
    def start_state(self) -> str:
        return self._start_state

    @property
    def accept_states(self) -> Set[str]:
        return set(self._accept_states)

    def get_transition(self, state: str, symbol: str) -> Optional[str]:
        return self._transition_table.get(state, {}).get(symbol)

    # --- States ---

    def add_state(self, state: str) -> None:
        if state in self._states:
            raise DfaError(f"State {state} already in states")
        self._states.add(state)

    def remove_state(self, state: str) -> None:
        self._require_state(state)
        if state == self._start_state:
            raise DfaError("Cannot remove start state")

        self._accept_states.discard(state)
        self._transition_table.pop(state, None)
        for row in self._transition_table.values():
            for symbol in [s for s, target in row.items() if target == state]:
                del row[symbol]

        self._states.remove(state)

    # --- Alphabet ---

    def add_symbol(self, symbol: str) -> None:
        if symbol in self._alphabet:
            raise DfaError(f"Symbol {symbol} already in alphabet")
        self._alphabet.add(symbol)

    def remove_symbol(self, symbol: str) -> None:
        self._require_symbol(symbol)
        for row in self._transition_table.values():
            row.pop(symbol, None)
        self._alphabet.remove(symbol)

    # --- Transitions ---

    def add_transition(self, state: str, symbol: str, next_state: str) -> None:
        self._require_state(state)
        self._require_symbol(symbol)
        self._require_state(next_state)
        self._transition_table.setdefault(state, {})[symbol] = next_state

    def remove_transition(self, state: str, symbol: str) -> None:
        self._require_state(state)
        self._require_symbol(symbol)
        if state not in self._transition_table:
            raise DfaError(f"No transition for state {state}")
        self._transition_table[state].pop(symbol, None)

    # --- Start / accept states ---

    def set_start_state(self, state: str) -> None:
        self._require_state(state)
        self._start_state = state

    def add_accept_state(self, state: str) -> None:
        self._require_state(state)
        if state in self._accept_states:
            raise DfaError(f"State {state} already in accept states")
        self._accept_states.add(state)

    def remove_accept_state(self, state: str) -> None:
        self._require_state(state)
        if state not in self._accept_states:
            raise DfaError(f"State {state} not in accept states")
        self._accept_states.remove(state)

    # --- Simulation ---

    def trace(self, input_string: str) -> List[SimulationStep]:
        """
        Walks the input from the start state and returns the steps taken.

        The walk stops at the first symbol with no transition; that last step
        carries `next_state=None`.
        """
        steps: List[SimulationStep] = []
        current_state = self._start_state
        for symbol in input_string:
            next_state = self.get_transition(current_state, symbol)
            steps.append(SimulationStep(current_state, symbol, next_state))
            logger.debug("\t%s --%s--> %s", current_state, symbol, next_state or '')
            if next_state is None:
                break
            current_state = next_state
        return steps

    def simulate(self, input_string: str) -> bool:
        logger.debug(">> %s", input_string)
        steps = self.trace(input_string)

        if steps and steps[-1].next_state is None:
            logger.debug("<< no transition")
            return False

        final_state = steps[-1].next_state if steps else self._start_state
        if final_state not in self._accept_states:
            logger.debug("<< not in accept state")
            return False

        logger.debug("<< in accept state")
        return True

    # --- Export ---

    def to_dict(self) -> dict:
        return {
            'states': sorted(self._states),
            'alphabet': sorted(self._alphabet),
            'transitionTable': {state: dict(row) for state, row in self._transition_table.items()},
            'startState': self._start_state,
            'acceptStates': sorted(self._accept_states),
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
