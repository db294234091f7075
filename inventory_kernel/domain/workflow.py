"""
Canonical workflow types (``inventory_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for document state machines.  Every lifecycle document
(issue slip, return, loss, waste, RIS, maintenance, transfer) declares one
``Workflow`` in its ``workflows.py``; status changes are checked against it
instead of by string comparisons in the handlers.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* Terminal states have no outgoing transitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from inventory_kernel.exceptions import InvalidTransitionError


def state_name(state: str | Enum) -> str:
    """Plain string value of a status, whether given as an enum or a str."""
    if isinstance(state, Enum):
        return state.value
    return state


@dataclass(frozen=True)
class Guard:
    """A condition that must be satisfied before a transition fires.

    Descriptive only; the handler that performs the transition evaluates it.
    """
    name: str
    description: str


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow.

    ``moves_stock=True`` marks transitions that write stock ledger entries.
    """
    from_state: str
    to_state: str
    action: str
    guard: Guard | None = None
    moves_stock: bool = False


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a document lifecycle."""
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(
                f"{self.name}: initial state {self.initial_state!r} is not a state"
            )
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(f"{self.name}: transition {t.action!r} uses unknown state")
            if t.from_state in self.terminal_states:
                raise ValueError(
                    f"{self.name}: terminal state {t.from_state!r} has an outgoing transition"
                )

    def transition_table(self) -> dict[str, frozenset[str]]:
        """from-state -> set of valid next states, terminal states included."""
        table: dict[str, set[str]] = {state: set() for state in self.states}
        for t in self.transitions:
            table[t.from_state].add(t.to_state)
        return {state: frozenset(targets) for state, targets in table.items()}

    def allowed_targets(self, state: str | Enum) -> frozenset[str]:
        return self.transition_table().get(state_name(state), frozenset())

    def can_transition(self, current: str | Enum, target: str | Enum) -> bool:
        return state_name(target) in self.allowed_targets(current)

    def transition_for(self, current: str | Enum, target: str | Enum) -> Transition:
        """
        Return the transition from ``current`` to ``target``.

        Raises:
            InvalidTransitionError: if the workflow has no such transition.
        """
        current, target = state_name(current), state_name(target)
        for t in self.transitions:
            if t.from_state == current and t.to_state == target:
                return t
        raise InvalidTransitionError(self.name, current, target)

    def is_terminal(self, state: str | Enum) -> bool:
        return state_name(state) in self.terminal_states
