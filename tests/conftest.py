"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from techtree.models import TopicNode

SAMPLE_TOPICS_YAML = """\
version: 1
nodes:
  - id: basics
    label: Python Basics
    cluster: foundations
    deps: []
    xp: 50
  - id: functions
    label: Functions
    cluster: foundations
    deps: [basics]
    xp: 50
  - id: classes
    label: Classes
    cluster: foundations
    deps: [basics]
    xp: 80
  - id: decorators
    label: Decorators
    cluster: foundations
    deps: [functions, classes]
    xp: 100
  - id: asyncio
    label: Asyncio
    cluster: concurrency
    deps: [functions]
    xp: 120
  - id: threads
    label: Threads
    cluster: concurrency
    deps: []
    xp: 60
"""


@pytest.fixture
def diamond() -> list[TopicNode]:
    """A -> {B, C} -> D, all in one cluster."""
    return [
        TopicNode(id="A", label="A", cluster="C1"),
        TopicNode(id="B", label="B", cluster="C1", deps=("A",)),
        TopicNode(id="C", label="C", cluster="C1", deps=("A",)),
        TopicNode(id="D", label="D", cluster="C1", deps=("B", "C")),
    ]


@pytest.fixture
def sample_topics() -> list[TopicNode]:
    """Two clusters; ``concurrency`` depends on ``foundations`` through asyncio."""
    return [
        TopicNode(id="basics", label="Python Basics", cluster="foundations", xp=50),
        TopicNode(id="functions", label="Functions", cluster="foundations", deps=("basics",), xp=50),
        TopicNode(id="classes", label="Classes", cluster="foundations", deps=("basics",), xp=80),
        TopicNode(id="decorators", label="Decorators", cluster="foundations", deps=("functions", "classes"), xp=100),
        TopicNode(id="asyncio", label="Asyncio", cluster="concurrency", deps=("functions",), xp=120),
        TopicNode(id="threads", label="Threads", cluster="concurrency", xp=60),
    ]


@pytest.fixture
def topics_file(tmp_path: Path) -> Path:
    """``topics.yml`` holding the sample topics."""
    path = tmp_path / "topics.yml"
    path.write_text(SAMPLE_TOPICS_YAML, encoding="utf-8")
    return path
