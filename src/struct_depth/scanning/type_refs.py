"""Type reference variants and the built-in name set.

A field type such as ``&'a [Option<Box<crate::tree::Node>>]`` is modelled as
a small tree of TypeRef values:

    ReferenceType(ArrayType(GenericType(PathType("Option"), (
        GenericType(PathType("Box"), (PathType("crate::tree::Node"),)),
    ))))

``dependencies()`` flattens such a tree into the raw, non built-in path
strings that become composition edges; ``primary_reference()`` picks the one
reference a type alias stands for.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

PATH_SEPARATOR = "::"
SELF_TYPE = "Self"

# Names excluded from edge generation. Matched against the full path, and
# against the last segment for paths rooted in the standard crates.
BUILTIN_TYPES: frozenset[str] = frozenset(
    {
        # numeric
        "u8", "u16", "u32", "u64", "u128", "usize",
        "i8", "i16", "i32", "i64", "i128", "isize",
        "f32", "f64",
        # text, boolean, unit
        "bool", "char", "str", "String", "()",
        # containers and wrappers
        "Vec", "VecDeque", "LinkedList", "BinaryHeap",
        "Option", "Result",
        "Box", "Rc", "Arc", "Weak", "Cow",
        "Cell", "RefCell", "Mutex", "RwLock",
        "HashMap", "HashSet", "BTreeMap", "BTreeSet",
        "PhantomData",
    }
)

STD_CRATES = ("std", "core", "alloc")


@dataclass(frozen=True)
class PathType:
    """A named type, possibly qualified: ``Leaf``, ``super::Leaf``, ``Self``."""

    path: str


@dataclass(frozen=True)
class GenericType:
    """A generic application: ``Wrapper<A, B>``."""

    base: PathType
    args: tuple[TypeRef, ...]


@dataclass(frozen=True)
class ReferenceType:
    """A borrowed reference or raw pointer to ``inner``."""

    inner: TypeRef
    pointer: bool = False


@dataclass(frozen=True)
class ArrayType:
    """A fixed-size array (``[T; N]``) or slice (``[T]``)."""

    element: TypeRef
    sized: bool = True


@dataclass(frozen=True)
class TupleType:
    """A tuple; the unit type is the empty tuple."""

    elements: tuple[TypeRef, ...]


@dataclass(frozen=True)
class OtherType:
    """Anything that never composes an aggregate: ``dyn Trait``, ``fn(A) -> B``."""

    text: str


TypeRef = Union[PathType, GenericType, ReferenceType, ArrayType, TupleType, OtherType]


def split_path(path: str) -> list[str]:
    return [segment for segment in path.split(PATH_SEPARATOR) if segment]


def join_path(segments: Iterable[str]) -> str:
    return PATH_SEPARATOR.join(segments)


def split_generic_suffix(name: str) -> tuple[str, str]:
    """Split ``a::Wrapper<T>`` into ``("a::Wrapper", "<T>")``."""
    index = name.find("<")
    if index == -1:
        return name, ""
    return name[:index], name[index:]


def is_builtin(path: str, extra: frozenset[str] = frozenset()) -> bool:
    """True if ``path`` names a built-in or standard library type."""
    if path in BUILTIN_TYPES or path in extra:
        return True
    segments = split_path(path)
    if len(segments) > 1 and segments[0] in STD_CRATES:
        return True
    return False


def dependencies(
    ref: TypeRef,
    type_params: frozenset[str] = frozenset(),
    extra_builtins: frozenset[str] = frozenset(),
) -> list[str]:
    """Flatten a type reference into its non built-in path references, in order.

    Generic parameters of the enclosing item (``type_params``) are skipped.
    """
    if isinstance(ref, PathType):
        if ref.path in type_params or is_builtin(ref.path, extra_builtins):
            return []
        return [ref.path]
    if isinstance(ref, GenericType):
        found = dependencies(ref.base, type_params, extra_builtins)
        for arg in ref.args:
            found.extend(dependencies(arg, type_params, extra_builtins))
        return found
    if isinstance(ref, ReferenceType):
        return dependencies(ref.inner, type_params, extra_builtins)
    if isinstance(ref, ArrayType):
        return dependencies(ref.element, type_params, extra_builtins)
    if isinstance(ref, TupleType):
        found = []
        for element in ref.elements:
            found.extend(dependencies(element, type_params, extra_builtins))
        return found
    if isinstance(ref, OtherType):
        return []
    raise TypeError(f"Unknown type reference: {ref!r}")


def render(ref: TypeRef) -> str:
    """Render a type reference back to compact source form."""
    if isinstance(ref, PathType):
        return ref.path
    if isinstance(ref, GenericType):
        return f"{ref.base.path}<{', '.join(render(arg) for arg in ref.args)}>"
    if isinstance(ref, ReferenceType):
        return f"{'*const ' if ref.pointer else '&'}{render(ref.inner)}"
    if isinstance(ref, ArrayType):
        return f"[{render(ref.element)}; _]" if ref.sized else f"[{render(ref.element)}]"
    if isinstance(ref, TupleType):
        return f"({', '.join(render(element) for element in ref.elements)})"
    if isinstance(ref, OtherType):
        return ref.text
    raise TypeError(f"Unknown type reference: {ref!r}")


def primary_reference(
    ref: TypeRef,
    type_params: frozenset[str] = frozenset(),
    extra_builtins: frozenset[str] = frozenset(),
) -> str | None:
    """The single reference an alias target stands for, or None.

    A generic application over a user type keeps its argument list as a
    suffix (``Wrapper<T>``); built-in wrappers are looked through
    (``Rc<Node>`` stands for ``Node``).
    """
    if isinstance(ref, PathType):
        deps = dependencies(ref, type_params, extra_builtins)
        return deps[0] if deps else None
    if isinstance(ref, GenericType):
        if dependencies(ref.base, type_params, extra_builtins):
            return render(ref)
        for arg in ref.args:
            found = primary_reference(arg, type_params, extra_builtins)
            if found is not None:
                return found
        return None
    if isinstance(ref, ReferenceType):
        return primary_reference(ref.inner, type_params, extra_builtins)
    if isinstance(ref, ArrayType):
        return primary_reference(ref.element, type_params, extra_builtins)
    if isinstance(ref, TupleType):
        for element in ref.elements:
            found = primary_reference(element, type_params, extra_builtins)
            if found is not None:
                return found
        return None
    if isinstance(ref, OtherType):
        return None
    raise TypeError(f"Unknown type reference: {ref!r}")
