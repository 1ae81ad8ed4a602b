"""Tests for dependency-aware emission ordering."""

from __future__ import annotations

import logging
import random
import time
from typing import Dict, List

import pytest

from ifacegen.models import OperationRecord, TypeKind, TypeRecord
from ifacegen.ordering import EmissionOrderer, order_registry
from ifacegen.registry import ItemRegistry


def _registry(graph: Dict[str, List[str]]) -> ItemRegistry:
    """Build a registry where each struct has one method taking its dependencies."""
    registry = ItemRegistry()
    for name, uses in graph.items():
        operation = OperationRecord.method("use_all(& self)", [], "use_all", False, list(uses), [])
        registry.declare_struct(name, [], [operation])
    return registry


def test_referenced_type_precedes_referencing_type() -> None:
    registry = _registry({"North": ["East"], "South": [], "East": []})

    order = order_registry(registry)

    assert order == ["South", "East", "North"]
    assert registry.emission_order == order
    assert [record.name for record in registry.ordered_types()] == order


def test_chain_is_emitted_leaf_first() -> None:
    registry = _registry({"F": ["N"], "N": ["O"], "O": []})
    assert EmissionOrderer(registry).order() == ["O", "N", "F"]


def test_revisited_type_is_moved_in_front_with_its_dependencies() -> None:
    registry = _registry({"A": ["C"], "B": ["A"], "C": []})
    assert EmissionOrderer(registry).order() == ["C", "A", "B"]


def test_diamond_places_shared_dependency_first() -> None:
    registry = _registry({"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": []})
    assert EmissionOrderer(registry).order() == ["D", "C", "B", "A"]


def test_unknown_and_primitive_types_are_ignored() -> None:
    registry = _registry({"Alone": ["i32", "String", "Missing"]})
    assert EmissionOrderer(registry).order() == ["Alone"]


def test_constructor_returning_own_type_is_not_a_cycle() -> None:
    registry = ItemRegistry()
    registry.declare_struct(
        "Point",
        [],
        [OperationRecord.method("new()->Point", [], "new", True, [], ["Point"])],
    )
    orderer = EmissionOrderer(registry)

    assert orderer.order() == ["Point"]
    assert orderer.find_cycles() == []


def test_traits_take_part_in_ordering() -> None:
    registry = _registry({"Button": ["Listener"]})
    registry.declare_type(TypeRecord(name="Listener", kind=TypeKind.TRAIT))
    assert EmissionOrderer(registry).order() == ["Listener", "Button"]


def test_reference_cycle_is_accepted_and_reported(caplog: pytest.LogCaptureFixture) -> None:
    registry = _registry({"B": ["A"], "A": ["B"]})
    orderer = EmissionOrderer(registry)

    with caplog.at_level(logging.WARNING, logger="ifacegen"):
        order = orderer.order()

    assert sorted(order) == ["A", "B"]
    assert len(order) == 2
    assert orderer.find_cycles() == [("A", "B", "A")]
    assert "Reference cycle accepted: A -> B -> A" in caplog.text


def test_find_cycles_orders_on_demand() -> None:
    registry = _registry({"A": ["B"], "B": ["C"], "C": ["A"]})
    assert EmissionOrderer(registry).find_cycles() == [("A", "B", "C", "A")]


@pytest.mark.parametrize("seed", range(5))
def test_random_acyclic_graphs_respect_every_edge(seed: int) -> None:
    rng = random.Random(seed)
    names = [f"T{index}" for index in range(12)]
    # Edges only point to later names, which keeps the graph acyclic.
    graph = {
        name: [other for other in names[index + 1 :] if rng.random() < 0.3]
        for index, name in enumerate(names)
    }
    shuffled = list(graph.items())
    rng.shuffle(shuffled)
    registry = _registry(dict(shuffled))

    orderer = EmissionOrderer(registry)
    order = orderer.order()

    assert sorted(order) == sorted(names)
    for name, uses in graph.items():
        for used in uses:
            assert order.index(used) < order.index(name)
    assert orderer.find_cycles() == []


def test_dense_acyclic_graph_orders_quickly() -> None:
    names = [f"T{index:02d}" for index in range(30)]
    registry = _registry({name: names[index + 1 :] for index, name in enumerate(names)})

    start = time.perf_counter()
    order = EmissionOrderer(registry).order()
    elapsed = time.perf_counter() - start

    assert order == list(reversed(names))
    assert elapsed < 1.0


def test_shared_subgraph_revisit_matches_full_walk() -> None:
    # Both Top and Side reach Mid; the second visit reuses Mid's front sequence.
    registry = _registry(
        {
            "Top": ["Mid", "Leaf"],
            "Side": ["Mid"],
            "Mid": ["Leaf", "Base"],
            "Leaf": ["Base"],
            "Base": [],
        }
    )
    assert EmissionOrderer(registry).order() == ["Base", "Leaf", "Mid", "Side", "Top"]


def test_cycle_below_shared_type_is_still_reported_on_revisit() -> None:
    registry = _registry({"Root": ["Loop"], "Other": ["Loop"], "Loop": ["Back"], "Back": ["Loop"]})
    orderer = EmissionOrderer(registry)

    order = orderer.order()

    assert sorted(order) == ["Back", "Loop", "Other", "Root"]
    assert order.index("Loop") < order.index("Root")
    assert order.index("Loop") < order.index("Other")
    assert orderer.find_cycles() == [("Back", "Loop", "Back")]
