"""Global test configuration — shared factories for entities and rankings.

This conftest provides:

1. **Entity factories** — ``make_entity`` builds in-memory records;
   ``write_entity`` writes a TOML entity file under ``tmp_path`` so loader
   and CLI tests exercise the real directory provider.

2. **Metric helpers** — :func:`field_metrics` builds metrics that read a
   raw integer field directly, so fusion tests can state metric values
   exactly instead of reverse-engineering the estimate heuristics.

3. **The three-entity scenario** — A, B and C with known (jobs, users,
   facts, links) values and a known final order C, B, A.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from langrank.ranking.metrics import Metric, MetricContext
from langrank.store.entity import Entity
from langrank.store.snapshot import Snapshot

if TYPE_CHECKING:
    from pathlib import Path

# (jobs, users, facts, links) per entity
SCENARIO_VALUES: dict[str, tuple[int, int, int, int]] = {
    "A": (100, 10, 10, 1),
    "B": (10, 100, 20, 2),
    "C": (50, 50, 100, 10),
}
SCENARIO_METRIC_NAMES = ("jobs", "users", "facts", "links")

EMPTY_CONTEXT = MetricContext(inbound_links={})


def field_metrics(*names: str) -> tuple[Metric, ...]:
    """Metrics that read the integer scalar field of the same name."""

    def _reader(name: str):
        def _extract(entity: Entity, context: MetricContext) -> int:
            return entity.get_int(name)

        return _extract

    return tuple(Metric(name, _reader(name)) for name in names)


def entity_with_values(entity_id: str, names: tuple[str, ...], values: tuple[int, ...], **kwargs) -> Entity:
    return Entity(
        id=entity_id,
        fields={name: str(value) for name, value in zip(names, values, strict=True)},
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Entity factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_entity():
    """Factory fixture — returns a callable that produces an Entity.

    Usage::

        def test_something(make_entity):
            entity = make_entity("python")
            entity = make_entity("vim", type="editor", links=("python",))
            entity = make_entity("c", series={"indeedJobs": {2022: "15000"}})
    """

    def _factory(
        entity_id: str = "python",
        *,
        title: str = "",
        type: str | None = "pl",
        fields: dict[str, str] | None = None,
        series: dict[str, dict[int, str]] | None = None,
        links: tuple[str, ...] = (),
        extensions: tuple[str, ...] = (),
    ) -> Entity:
        return Entity(
            id=entity_id,
            title=title,
            type=type,
            fields=fields or {},
            series=series or {},
            links=links,
            extensions=extensions,
        )

    return _factory


@pytest.fixture
def write_entity(tmp_path: Path):
    """Factory fixture — writes ``<tmp_path>/entities/<id>.toml`` and returns its path.

    Usage::

        def test_something(write_entity):
            write_entity("python", 'title = "Python"\\ntype = "pl"\\n')
    """
    entities_dir = tmp_path / "entities"
    entities_dir.mkdir(exist_ok=True)

    def _factory(entity_id: str, content: str) -> Path:
        path = entities_dir / f"{entity_id}.toml"
        path.write_text(content, encoding="utf-8")
        return path

    return _factory


# ---------------------------------------------------------------------------
# Scenario fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scenario_metrics() -> tuple[Metric, ...]:
    return field_metrics(*SCENARIO_METRIC_NAMES)


@pytest.fixture
def scenario_entities() -> list[Entity]:
    """A, B, C in population order, types chosen so B is not a language."""
    types = {"A": "pl", "B": "library", "C": "pl"}
    return [
        entity_with_values(entity_id, SCENARIO_METRIC_NAMES, values, type=types[entity_id])
        for entity_id, values in SCENARIO_VALUES.items()
    ]


@pytest.fixture
def scenario_snapshot(scenario_entities: list[Entity]) -> Snapshot:
    return Snapshot(scenario_entities)
