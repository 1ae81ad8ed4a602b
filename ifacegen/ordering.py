"""Emission ordering of struct and trait blocks.

Given types North, South and East where North has a method taking an East,
East must be written before North even if North was found first. The
orderer visits each type depth first, moving it to the front of the output
every time it is reached and then visiting the types it references, so
every referenced type ends up in front of the types that use it.

Reference cycles are not rejected. A type that refers back to a type still
being visited is not followed again, which leaves the last visited member
of the cycle frontmost; the cycle is reported as a warning.

Visiting a type whose reachable types contain no cycle always leaves the
same sequence at the front of the output. That sequence is remembered the
first time it is produced, and later visits move it to the front in one
step instead of walking every path below the type again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Sequence, Set, Tuple

from .logging import get_logger
from .models import TypeRecord
from .registry import ItemRegistry


@dataclass
class _OrderState:
    pending: Dict[str, None]
    output: List[str] = field(default_factory=list)
    # Front sequence and its members, per type with an acyclic reachable set.
    fronts: Dict[str, Tuple[List[str], FrozenSet[str]]] = field(default_factory=dict)

    def move_to_front(self, names: Sequence[str], members: Set[str] | FrozenSet[str]) -> None:
        self.output[:] = list(names) + [name for name in self.output if name not in members]
        for name in names:
            self.pending.pop(name, None)


class EmissionOrderer:
    """Linearizes the struct and trait records of a registry."""

    def __init__(self, registry: ItemRegistry) -> None:
        self._registry = registry
        self._cycles: List[Tuple[str, ...]] = []
        self._ordered = False
        self.logger = get_logger("ordering")

    def order(self) -> List[str]:
        """Return type names so that referenced types precede referencing ones."""
        state = _OrderState(pending=dict.fromkeys(self._registry.names()))
        self._cycles = []

        while state.pending:
            name = next(iter(state.pending))
            record = self._registry.get(name)
            if record is None:  # pragma: no cover - names() only lists registered records
                state.pending.pop(name)
                continue
            self._visit(record, state, [])

        for cycle in self._cycles:
            self.logger.warning(
                "Reference cycle accepted: %s; order within the cycle is not guaranteed",
                " -> ".join(cycle),
            )
        self._ordered = True
        return list(state.output)

    def find_cycles(self) -> List[Tuple[str, ...]]:
        """Return the reference cycles met while ordering, e.g. ``("A", "B", "A")``."""
        if not self._ordered:
            self.order()
        return list(self._cycles)

    def _visit(
        self, record: TypeRecord, state: _OrderState, visiting: List[str]
    ) -> Tuple[Set[str], bool]:
        """Visit ``record`` and return the names it reached and whether that was cycle free."""
        name = record.name
        known = state.fronts.get(name)
        if known is not None:
            front, members = known
            state.move_to_front(front, members)
            return set(members), True

        state.move_to_front([name], {name})
        reached = {name}
        acyclic = True

        visiting.append(name)
        for type_name in record.referenced_types():
            if type_name == name:
                # A constructor returns its own type; that is not a dependency.
                continue
            referenced = self._registry.get(type_name)
            if referenced is None:
                continue
            if type_name in visiting:
                acyclic = False
                cycle = _canonical_cycle(visiting[visiting.index(type_name) :])
                if cycle not in self._cycles:
                    self._cycles.append(cycle)
                continue
            below, below_acyclic = self._visit(referenced, state, visiting)
            reached |= below
            acyclic = acyclic and below_acyclic
        visiting.pop()

        if acyclic:
            # Everything reached was moved in front of everything else.
            state.fronts[name] = (state.output[: len(reached)], frozenset(reached))
        return reached, acyclic


def _canonical_cycle(members: List[str]) -> Tuple[str, ...]:
    """Rotate ``members`` to start at its smallest name and close the loop."""
    start = members.index(min(members))
    rotated = members[start:] + members[:start]
    return tuple(rotated) + (rotated[0],)


def order_registry(registry: ItemRegistry) -> List[str]:
    """Compute and store the emission order of ``registry``."""
    registry.emission_order = EmissionOrderer(registry).order()
    return registry.emission_order


__all__ = ["EmissionOrderer", "order_registry"]
