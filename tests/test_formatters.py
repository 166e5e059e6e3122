"""Tests for the formatters package."""

import json

import pytest
from rich.console import Console

from struct_depth import analyze
from struct_depth.config import AnalysisConfig
from struct_depth.formatters import (
    JsonFormatter,
    OutputOptions,
    RichFormatter,
    get_formatter,
)


@pytest.fixture
def result(make_crate):
    """Result with depth, unresolved references, traits and a warning."""
    provider = make_crate(
        lib="""
        mod broken;
        trait Base {}
        trait Shape: Base {}
        pub struct Leaf;
        pub struct Mid { l: Leaf, e: Outside }
        pub struct Top { m: Mid }
        impl Shape for Top {}
        """,
        broken="struct Bad { x: }",
    )
    return analyze(provider, config=AnalysisConfig(parallel=False))


def rich_text(options, result):
    console = Console(width=120, force_terminal=False, color_system=None)
    return RichFormatter(options, console=console).format(result)


class TestGetFormatter:
    """Test formatter lookup."""

    def test_known(self):
        assert isinstance(get_formatter("rich"), RichFormatter)
        assert isinstance(get_formatter("json"), JsonFormatter)

    def test_options_passed(self):
        assert get_formatter("json", OutputOptions(top=3)).options.top == 3

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestJsonFormatter:
    """Test the JSON document."""

    def test_summary_and_depths(self, result):
        data = json.loads(JsonFormatter().format(result))
        assert data["summary"]["max_depth"] == 3
        assert data["summary"]["aggregate_count"] == 3
        assert data["summary"]["files_skipped"] == 1
        assert data["depths"] == {"Leaf": 1, "Mid": 2, "Top": 3}

    def test_deepest_limited_by_top(self, result):
        data = JsonFormatter(OutputOptions(top=2)).to_dict(result)
        assert data["deepest"] == [{"name": "Top", "depth": 3}, {"name": "Mid", "depth": 2}]

    def test_edges_and_unresolved(self, result):
        data = JsonFormatter().to_dict(result)
        assert data["edges"]["Mid"] == ["Leaf", "Outside"]
        assert data["unresolved"] == {"Mid": ["Outside"]}

    def test_diagnostics(self, result):
        data = JsonFormatter().to_dict(result)
        assert [d["code"] for d in data["diagnostics"]] == ["SD102"]

    def test_traits_only_when_requested(self, result):
        assert "traits" not in JsonFormatter().to_dict(result)
        traits = JsonFormatter(OutputOptions(traits=True)).to_dict(result)["traits"]
        assert traits["type_depths"] == {"Top": 2}
        assert traits["trait_count"] == 2
        assert "files" not in traits

    def test_trait_groups_when_requested(self, result):
        options = OutputOptions(traits=True, files=True, dirs=True)
        traits = JsonFormatter(options).to_dict(result)["traits"]
        summary = {"max_depth": 2, "trait_count": 2, "impl_count": 1}
        assert traits["files"] == {"lib.rs": summary}
        assert traits["directories"] == {".": summary}

    def test_render_prints_json(self, result, capsys):
        JsonFormatter().render(result)
        assert json.loads(capsys.readouterr().out)["summary"]["max_depth"] == 3


class TestRichFormatter:
    """Test the terminal rendering."""

    def test_summary_and_table(self, result):
        text = rich_text(OutputOptions(), result)
        assert "Composition Depth" in text
        assert "Maximum composition depth: 3" in text
        assert "Deepest aggregates" in text
        assert "Top" in text

    def test_warning_diagnostics_always_shown(self, result):
        text = rich_text(OutputOptions(), result)
        assert "[SD102]" in text

    def test_edges_optional(self, result):
        assert "Field edges" not in rich_text(OutputOptions(), result)
        assert "Field edges" in rich_text(OutputOptions(edges=True), result)

    def test_traits_optional(self, result):
        text = rich_text(OutputOptions(traits=True), result)
        assert "Trait depth per type" in text
        assert "2 traits" in text
        assert "Trait summary per file" not in text

    def test_trait_groups(self, result):
        text = rich_text(OutputOptions(traits=True, files=True, dirs=True), result)
        assert "Trait summary per file" in text
        assert "Trait summary per directory" in text
        assert "lib.rs" in text

    def test_no_structs(self, make_crate):
        empty = analyze(make_crate(lib="fn main() {}"), config=AnalysisConfig(parallel=False))
        assert "No structs found." in rich_text(OutputOptions(), empty)
