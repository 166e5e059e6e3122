"""Shared test fixtures for struct-depth tests."""

import textwrap

import pytest

from struct_depth.config import AnalysisConfig
from struct_depth.sources import InMemorySourceProvider


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def _crate(**files: str) -> InMemorySourceProvider:
    """In-memory crate from keyword arguments: ``_crate(lib="...", a="...")``.

    Keys map to ``<key>.rs``; double underscores become directory
    separators (``shapes__mod`` -> ``shapes/mod.rs``).
    """
    return InMemorySourceProvider(
        {f"{name.replace('__', '/')}.rs": textwrap.dedent(text) for name, text in files.items()}
    )


@pytest.fixture
def make_crate():
    """Factory for in-memory crates, see ``_crate``."""
    return _crate


@pytest.fixture
def sequential_config():
    """Config that never spawns worker threads."""
    return AnalysisConfig(parallel=False)


@pytest.fixture
def chain_graph():
    """Chain graph: a -> b -> c -> d."""
    return {
        "a": ["b"],
        "b": ["c"],
        "c": ["d"],
        "d": [],
    }


@pytest.fixture
def diamond_graph():
    """Diamond: a -> {b, c} -> d."""
    return {
        "a": ["b", "c"],
        "b": ["d"],
        "c": ["d"],
        "d": [],
    }


@pytest.fixture
def cycle_graph():
    """Two-node cycle a <-> b with a tail b -> c."""
    return {
        "a": ["b"],
        "b": ["a", "c"],
        "c": [],
    }


@pytest.fixture
def rust_project(tmp_path):
    """A small on-disk crate with an out-of-line module tree."""
    src = tmp_path / "src"
    (src / "shapes").mkdir(parents=True)
    (src / "lib.rs").write_text(
        textwrap.dedent(
            """\
            mod shapes;
            mod canvas;

            use crate::shapes::Circle;

            pub struct Scene {
                canvas: canvas::Canvas,
                focus: Circle,
                anchor: shapes::Point,
            }
            """
        )
    )
    (src / "canvas.rs").write_text(
        textwrap.dedent(
            """\
            use super::shapes::{Circle, Square as Box2};

            pub struct Canvas {
                circles: Vec<Circle>,
                boxes: [Box2; 4],
            }
            """
        )
    )
    (src / "shapes" / "mod.rs").write_text(
        textwrap.dedent(
            """\
            mod point;
            pub use point::Point;

            pub struct Circle {
                center: Point,
                radius: f64,
            }

            pub struct Square {
                corner: Point,
            }
            """
        )
    )
    (src / "shapes" / "point.rs").write_text(
        "pub struct Point { x: f64, y: f64 }\n"
    )
    return tmp_path
