"""Dotted-path access over trees of mappings and sequences.

Paths look like ``sections.2.content.items.0.title``. A segment made only of
digits addresses a position in a sequence, any other segment a key in a
mapping. Updates never touch the input: every container on the path is
copied and everything else is shared with the original tree.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .errors import InvalidPath

_MISSING = object()


def split_path(path: str) -> list[str]:
    if not path:
        raise InvalidPath(path, "path is empty")
    segments = path.split(".")
    if any(segment == "" for segment in segments):
        raise InvalidPath(path, "path contains an empty segment")
    return segments


def is_index(segment: str) -> bool:
    return segment.isdigit() and segment.isascii()


def _is_sequence(node: Any) -> bool:
    return isinstance(node, (list, tuple))


def _is_container(node: Any) -> bool:
    return isinstance(node, Mapping) or _is_sequence(node)


def get_at_path(root: Any, path: str, default: Any = None) -> Any:
    """Return the value stored at ``path`` or ``default`` when it is absent."""
    node = root
    for segment in split_path(path):
        if isinstance(node, Mapping):
            node = node.get(segment, _MISSING)
        elif _is_sequence(node) and is_index(segment):
            index = int(segment)
            node = node[index] if index < len(node) else _MISSING
        else:
            return default
        if node is _MISSING:
            return default
    return node


def set_at_path(root: Any, path: str, value: Any) -> Any:
    """Return a copy of ``root`` with ``value`` stored at ``path``.

    Missing intermediate containers are created: a list when the following
    segment is an index, a dict otherwise. A list created this way accepts
    index 0 so the first element of a previously absent list can be written.
    Any other index past the end of a sequence raises :class:`InvalidPath`.
    """
    segments = split_path(path)
    if not _is_container(root):
        raise InvalidPath(path, "root is not a mapping or sequence")
    return _assign(root, segments, value, path, created=False)


def _assign(node: Any, segments: Sequence[str], value: Any, path: str, *, created: bool) -> Any:
    head, rest = segments[0], segments[1:]

    if isinstance(node, Mapping):
        copy = dict(node)
        copy[head] = _child(copy.get(head), rest, value, path)
        return copy

    if not is_index(head):
        raise InvalidPath(path, f"segment {head!r} cannot index a sequence")
    index = int(head)
    items = list(node)
    if index < len(items):
        items[index] = _child(items[index], rest, value, path)
    elif created and index == len(items) == 0:
        items.append(_child(None, rest, value, path))
    else:
        raise InvalidPath(path, f"index {index} is out of range for a sequence of {len(items)}")
    return tuple(items) if isinstance(node, tuple) else items


def _child(current: Any, rest: Sequence[str], value: Any, path: str) -> Any:
    if not rest:
        return value
    if current is None:
        fresh: Any = [] if is_index(rest[0]) else {}
        return _assign(fresh, rest, value, path, created=True)
    if not _is_container(current):
        raise InvalidPath(path, f"cannot descend into {type(current).__name__} value")
    return _assign(current, rest, value, path, created=False)


__all__ = ["get_at_path", "is_index", "set_at_path", "split_path"]
