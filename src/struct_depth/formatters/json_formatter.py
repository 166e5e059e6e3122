"""JSON formatter for struct-depth."""

import json
from typing import Any

from ..analysis.models import AnalysisResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render a result as one JSON document.

    The document always carries every aggregate; ``top`` only orders the
    ``deepest`` list.
    """

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        return json.dumps(self.to_dict(result), indent=2)

    def to_dict(self, result: AnalysisResult) -> dict[str, Any]:
        output: dict[str, Any] = {
            "root": result.root,
            "summary": {
                "max_depth": result.max_depth,
                "aggregate_count": len(result.depths.depths),
                "edge_count": result.graph.edge_count,
                **result.stats.to_dict(),
            },
            "deepest": [
                {"name": name, "depth": depth}
                for name, depth in result.depths.top(self.options.top)
            ],
            "depths": dict(sorted(result.depths.depths.items())),
            "edges": {name: result.graph.edges[name] for name in result.graph.nodes},
            "unresolved": dict(sorted(result.graph.unresolved.items())),
            "diagnostics": [d.to_json() for d in result.diagnostics],
        }
        if self.options.traits:
            traits = result.traits
            output["traits"] = {
                "max_depth": traits.max_depth,
                "trait_count": traits.trait_count,
                "impl_count": traits.impl_count,
                "trait_depths": dict(sorted(traits.trait_depths.items())),
                "type_depths": dict(sorted(traits.type_depths.items())),
            }
            if self.options.files:
                output["traits"]["files"] = {
                    path: summary.to_dict() for path, summary in traits.files.items()
                }
            if self.options.dirs:
                output["traits"]["directories"] = {
                    path: summary.to_dict() for path, summary in traits.directories.items()
                }
        return output
