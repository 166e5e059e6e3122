"""Module path normalization.

Rewrites the relative qualifiers of a Rust path into absolute form, given
the module the path is written in:

    crate::a::B    ->  a::B                (from anywhere)
    self::B        ->  m::B                (in module m)
    super::B       ->  B                   (in module m)
    super::super::B -> a::B                (in module a::m::n)

Paths without a relative qualifier are returned unchanged; whether a bare
name is local or imported is decided by the resolver.
"""

from __future__ import annotations

from ..scanning.syntax import ModulePath
from ..scanning.type_refs import join_path, split_path

CRATE = "crate"
SELF_MODULE = "self"
SUPER = "super"

RELATIVE_QUALIFIERS = frozenset({CRATE, SELF_MODULE, SUPER})


def has_relative_qualifier(path: str) -> bool:
    """True if ``path`` starts with ``crate``, ``self`` or ``super``."""
    segments = split_path(path)
    return bool(segments) and segments[0] in RELATIVE_QUALIFIERS


def is_absolute(path: str) -> bool:
    """True for ``::name`` paths rooted at the extern prelude."""
    return path.startswith("::")


def normalize(path: str, module: ModulePath) -> str:
    """Resolve ``crate::``, ``self::`` and ``super::`` against ``module``.

    ``super`` may repeat; each use drops one trailing module segment, and
    climbing above the crate root stays at the root.
    """
    segments = split_path(path)
    if not segments:
        return path

    head = segments[0]
    if head == CRATE:
        return join_path(segments[1:])
    if head == SELF_MODULE:
        return join_path((*module, *segments[1:]))
    if head == SUPER:
        context = list(module)
        rest = segments
        while rest and rest[0] == SUPER:
            if context:
                context.pop()
            rest = rest[1:]
        return join_path((*context, *rest))

    # Leading `::` is dropped by split_path
    return join_path(segments)


def parent_module(name: str) -> tuple[ModulePath, str]:
    """Split a qualified name into its module path and last segment."""
    segments = split_path(name)
    if not segments:
        return (), name
    return tuple(segments[:-1]), segments[-1]
