"""Graph algorithms: strongly connected components and cycle-safe depth.

Depth of a node is the length of the longest path that starts at it, where
the walk keeps a per-path visited set: a child already on the current path
ends the walk there. With ``revisit_weight=1`` (composition depth) that
dead end still counts the repeated node, so a direct self loop has depth 2;
with ``revisit_weight=0`` (trait depth) it counts nothing.

``compute_depths`` memoizes per strongly connected component. Nodes reached
from a node in another component can never lie on the current path, so
their depth does not depend on how they were reached; only walks inside a
cyclic component are repeated per start node.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from .models import CompositionGraph, DepthResult


def tarjan_scc(adjacency: Mapping[str, Sequence[str]], all_nodes: Iterable[str]) -> list[set[str]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    composition chains. Components are returned in reverse topological
    order: every component comes after the components it points to.
    """
    nodes = list(all_nodes)
    members = set(nodes)
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    result: list[set[str]] = []

    for root in nodes:
        if root in index:
            continue

        # Explicit call stack: each frame is (node, neighbor_iterator)
        call_stack: list[tuple] = []
        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        neighbors = [w for w in adjacency.get(root, []) if w in members]
        call_stack.append((root, iter(neighbors)))

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    w_neighbors = [n for n in adjacency.get(w, []) if n in members]
                    call_stack.append((w, iter(w_neighbors)))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: set[str] = set()
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.add(w)
                        if w == v:
                            break
                    result.append(component)

    return result


def _walk_depth(
    start: str,
    adjacency: Mapping[str, Sequence[str]],
    revisit_weight: int,
    scope: Optional[set[str]] = None,
    memo: Optional[Mapping[str, int]] = None,
) -> int:
    """Longest guarded walk from ``start`` (iterative).

    Children outside ``scope`` are not walked; their depth is read from
    ``memo`` instead. With no scope every known child is walked.
    """
    on_path = {start}
    # Frames: (node, child iterator, depth at node); best[i] belongs to frame i
    stack = [(start, iter(adjacency.get(start, ())), 1)]
    best = [1]

    while stack:
        node, children, current = stack[-1]
        pushed = False
        for child in children:
            if child not in adjacency:
                continue
            if scope is not None and child not in scope:
                best[-1] = max(best[-1], current + memo[child])
                continue
            if child in on_path:
                best[-1] = max(best[-1], current + revisit_weight)
                continue
            on_path.add(child)
            stack.append((child, iter(adjacency.get(child, ())), current + 1))
            best.append(current + 1)
            pushed = True
            break

        if not pushed:
            stack.pop()
            on_path.discard(node)
            value = best.pop()
            if not best:
                return value
            best[-1] = max(best[-1], value)

    return 1


def path_depth(
    adjacency: Mapping[str, Sequence[str]], node: str, revisit_weight: int = 1
) -> int:
    """Depth of one node by a plain guarded walk over the whole graph.

    Returns 0 for a node that is not in ``adjacency``.
    """
    if node not in adjacency:
        return 0
    return _walk_depth(node, adjacency, revisit_weight)


def longest_paths(
    adjacency: Mapping[str, Sequence[str]], revisit_weight: int = 1
) -> dict[str, int]:
    """Depth of every node, memoized across strongly connected components."""
    memo: dict[str, int] = {}
    for component in tarjan_scc(adjacency, sorted(adjacency)):
        if len(component) == 1:
            (node,) = component
            if node not in adjacency.get(node, ()):
                # Acyclic: every child is already final
                children = [memo[c] for c in adjacency.get(node, ()) if c in adjacency]
                memo[node] = 1 + max(children, default=0)
                continue
        for node in sorted(component):
            memo[node] = _walk_depth(node, adjacency, revisit_weight, component, memo)
    return memo


def composition_depth(graph: CompositionGraph, node: str) -> int:
    """Composition depth of a single aggregate, computed without memoization."""
    return path_depth(graph.adjacency(), node)


def compute_depths(graph: CompositionGraph) -> DepthResult:
    """Composition depth of every aggregate in the graph."""
    return DepthResult(depths=longest_paths(graph.adjacency()))
