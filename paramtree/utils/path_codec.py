"""Conversions between parameter names, path components and config trees.

A parameter name is an absolute, slash-separated string such as
``/cfg/db/port``. Its path is the tuple of components ``("cfg", "db", "port")``.
A config tree is the nested dict/list structure produced by parsing JSON or
TOML; ``flatten`` turns it into ``(path, leaf)`` pairs and ``treeify`` rebuilds
it from such pairs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from paramtree.core.errors import MalformedPathError

ParameterPath = tuple[str, ...]
Scalar = str | int | float | bool | None

# Leaf value meaning "remove this key" instead of "store an empty string".
DELETE_SENTINEL = ""


def _check_component(component: str, *, source: str) -> None:
    if not component:
        raise MalformedPathError(
            code="empty_path_component",
            message=f"Parameter path contains an empty component: {source!r}",
            details={"path": source},
        )
    if "/" in component:
        raise MalformedPathError(
            code="slash_in_path_component",
            message=f"Path component {component!r} must not contain '/'",
            details={"path": source},
        )


def path_to_name(path: Iterable[str]) -> str:
    """Join path components into an absolute parameter name.

    Raises:
        MalformedPathError: If the path is empty or a component is empty or
            contains a slash.
    """
    components = tuple(path)
    if not components:
        raise MalformedPathError(
            code="empty_path",
            message="Parameter path must have at least one component",
        )
    source = "/".join(components)
    for component in components:
        _check_component(component, source=source)
    return "/" + source


def name_to_path(name: str) -> ParameterPath:
    """Split a parameter name into its path components.

    A single leading slash is optional. Empty components (``"/a//b"``, a
    trailing slash, or an empty name) are rejected rather than collapsed.

    Raises:
        MalformedPathError: If any component is empty.
    """
    stripped = name[1:] if name.startswith("/") else name
    components = tuple(stripped.split("/"))
    for component in components:
        _check_component(component, source=name)
    return components


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def flatten(tree: Any, prefix: Iterable[str] = ()) -> list[tuple[ParameterPath, Scalar]]:
    """Flatten a config tree into ``(path, leaf)`` pairs, depth first.

    Mapping keys and sequence indices both become path components. Empty
    mappings and sequences produce no pairs. Empty-string leaves are kept so
    callers can treat them as deletions.

    Args:
        tree: Scalar, sequence or mapping to flatten.
        prefix: Components prepended to every emitted path.

    Returns:
        List of pairs in the order the leaves appear in ``tree``.

    Raises:
        MalformedPathError: If a mapping key is empty or contains a slash.
    """
    base = tuple(prefix)
    if isinstance(tree, Mapping):
        pairs: list[tuple[ParameterPath, Scalar]] = []
        for key, child in tree.items():
            key = str(key)
            _check_component(key, source="/".join((*base, key)))
            pairs.extend(flatten(child, (*base, key)))
        return pairs
    if _is_sequence(tree):
        pairs = []
        for index, child in enumerate(tree):
            pairs.extend(flatten(child, (*base, str(index))))
        return pairs
    return [(base, tree)]


def _restore_sequences(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    for key, child in node.items():
        node[key] = _restore_sequences(child)
    indices = [str(i) for i in range(len(node))]
    if node and set(node) == set(indices):
        return [node[i] for i in indices]
    return node


def treeify(
    pairs: Iterable[tuple[Iterable[str], Any]],
    *,
    restore_sequences: bool = True,
) -> dict[str, Any] | list[Any]:
    """Build a nested tree from ``(path, value)`` pairs.

    Intermediate mappings are created on demand. When two pairs share a path
    the later one wins; a scalar sitting where a later pair needs a mapping
    is replaced by that mapping.

    Sequence indices and mapping keys share one namespace once flattened, so
    a mapping keyed exactly ``"0".."n-1"`` cannot be told apart from a list.
    With ``restore_sequences`` both come back as lists, the root included;
    sparse or non-numeric keys always stay a mapping.

    Args:
        pairs: Paths (component sequences) and their values, in input order.
        restore_sequences: Turn mappings keyed exactly ``"0".."n-1"`` back into
            lists, so sequences written by ``flatten`` read back as lists.

    Returns:
        The rebuilt tree. Without sequence restoration the root is always a
        mapping; an empty input gives an empty mapping.
    """
    data: dict[str, Any] = {}
    for path, value in pairs:
        components = tuple(path)
        if not components:
            continue
        node = data
        for part in components[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[components[-1]] = value

    if not restore_sequences:
        return data
    return _restore_sequences(data)
