"""Data models for composition and trait graphs.

Nodes are fully qualified names. Edges are directed:
``edges[A]`` contains ``B`` means a field of A has type B.
"""

from dataclasses import dataclass, field

from ..scanning.type_refs import split_generic_suffix


def node_key(name: str) -> str:
    """Graph node a resolved name refers to (``a::Wrapper<T>`` -> ``a::Wrapper``)."""
    return split_generic_suffix(name)[0]


@dataclass
class CompositionGraph:
    """Aggregate name -> resolved field type names.

    Edge lists keep field order and duplicates. Names that are not
    aggregates stay in the edge list but contribute no depth; they are
    also listed per node in ``unresolved``.
    """

    edges: dict[str, list[str]] = field(default_factory=dict)
    unresolved: dict[str, list[str]] = field(default_factory=dict)
    kinds: dict[str, str] = field(default_factory=dict)

    @property
    def nodes(self) -> list[str]:
        return sorted(self.edges)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self.edges.values())

    def children(self, node: str) -> list[str]:
        """Known aggregate children of ``node``, in field order."""
        return [key for key in map(node_key, self.edges.get(node, ())) if key in self.edges]

    def adjacency(self) -> dict[str, list[str]]:
        """Node -> known children, for the depth algorithms."""
        return {node: self.children(node) for node in self.edges}


@dataclass
class DepthResult:
    """Composition depth per aggregate plus the global maximum.

    A node with no aggregate-typed fields has depth 1; an empty graph has
    maximum 0.
    """

    depths: dict[str, int] = field(default_factory=dict)

    @property
    def max_depth(self) -> int:
        return max(self.depths.values(), default=0)

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        """The ``n`` deepest aggregates, deepest first, ties by name."""
        ranked = sorted(self.depths.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:n]


@dataclass
class TraitGroupSummary:
    """Trait figures for the declarations of one file or directory.

    Attributes:
        max_depth: Deepest trait implemented by an ``impl`` in the group
        trait_count: Traits declared in the group
        impl_count: Distinct types implemented in the group
    """

    max_depth: int = 0
    trait_count: int = 0
    impl_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "max_depth": self.max_depth,
            "trait_count": self.trait_count,
            "impl_count": self.impl_count,
        }


@dataclass
class TraitDepthResult:
    """Trait hierarchy depths.

    Attributes:
        trait_depths: Trait -> 1 + deepest supertrait chain (external traits count 1)
        type_depths: Implementing type -> deepest trait it implements
        supertraits: Trait -> resolved supertrait names
        implementations: Type -> resolved trait names it implements
        trait_count: Traits declared in the analyzed sources
        files: Source file -> summary of the traits and impls it declares
        directories: Directory -> summary of the files directly inside it
    """

    trait_depths: dict[str, int] = field(default_factory=dict)
    type_depths: dict[str, int] = field(default_factory=dict)
    supertraits: dict[str, list[str]] = field(default_factory=dict)
    implementations: dict[str, list[str]] = field(default_factory=dict)
    trait_count: int = 0
    files: dict[str, TraitGroupSummary] = field(default_factory=dict)
    directories: dict[str, TraitGroupSummary] = field(default_factory=dict)

    @property
    def impl_count(self) -> int:
        """Number of types with at least one trait implementation."""
        return len(self.implementations)

    @property
    def max_depth(self) -> int:
        return max(self.type_depths.values(), default=0)

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        ranked = sorted(self.type_depths.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:n]
