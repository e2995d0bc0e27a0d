"""Include path parsing and per-path inclusion limits."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Iterator, Mapping


@dataclass
class IncludeNode:
    """A node of the include tree; the root has one child per top-level relation."""

    children: dict[str, "IncludeNode"] = field(default_factory=dict)

    def add_path(self, segments: Iterable[str]) -> None:
        node = self
        for segment in segments:
            node = node.children.setdefault(segment, IncludeNode())

    def get(self, name: str) -> "IncludeNode | None":
        return self.children.get(name)

    def roots(self) -> list[str]:
        return list(self.children)

    def paths(self, prefix: str = "") -> list[str]:
        """Return every dotted path in the tree, parents before children."""
        return list(self._walk(prefix, leaves_only=False))

    def leaf_paths(self, prefix: str = "") -> list[str]:
        return list(self._walk(prefix, leaves_only=True))

    def _walk(self, prefix: str, leaves_only: bool) -> Iterator[str]:
        for name, child in self.children.items():
            path = f"{prefix}{name}"
            if not leaves_only or not child.children:
                yield path
            yield from child._walk(f"{path}.", leaves_only)

    def prune(self, keep: Callable[[str], bool]) -> "IncludeNode":
        """Return a new tree holding the accepted paths and their ancestors."""
        pruned = IncludeNode()
        for path in self.paths():
            if keep(path):
                pruned.add_path(path.split("."))
        return pruned

    def __bool__(self) -> bool:
        return bool(self.children)


def split_include_paths(raw: str | Iterable[str] | None) -> list[str]:
    """Split a raw include expression into normalized dotted paths."""
    if raw is None:
        return []
    entries = raw.split(",") if isinstance(raw, str) else [str(item) for item in raw]
    paths: list[str] = []
    for entry in entries:
        segments = [segment.strip() for segment in entry.split(".")]
        segments = [segment for segment in segments if segment]
        if not segments:
            continue
        path = ".".join(segments)
        if path not in paths:
            paths.append(path)
    return paths


def parse_include_tree(raw: str | Iterable[str] | None) -> IncludeNode:
    """Parse ``"author.company,comments"`` into an include tree.

    Empty entries and empty segments are dropped; repeated paths merge.
    """
    root = IncludeNode()
    for path in split_include_paths(raw):
        root.add_path(path.split("."))
    return root


def normalize_include_limit(value: Any) -> int | None:
    """Return a positive integer limit, or ``None`` for "no limit"."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        # Magnitudes past 18 digits count as no limit.
        if not number.is_finite() or number.adjusted() > 18:
            return None
        limit = int(number)
    else:
        return None
    return limit if limit > 0 else None


class IncludeLimitResolver:
    """Resolve how many related items an include path may contribute.

    ``spec`` is the client value (a scalar applying to every path, or a map
    keyed by dotted path, nested segments or leaf relation name); ``default``
    is the configured fallback.
    """

    def __init__(self, spec: Any = None, default: Any = None) -> None:
        self.spec = spec
        self.default = default

    def resolve(self, path: str) -> int | None:
        spec = self.spec
        if spec is None:
            return normalize_include_limit(self.default)
        if not isinstance(spec, Mapping):
            return normalize_include_limit(spec)

        if path in spec and not isinstance(spec[path], Mapping):
            return normalize_include_limit(spec[path])

        segments = path.split(".")
        node: Any = spec
        for segment in segments:
            if not isinstance(node, Mapping) or segment not in node:
                node = None
                break
            node = node[segment]
        if node is not None and not isinstance(node, Mapping):
            return normalize_include_limit(node)

        leaf = segments[-1]
        if leaf in spec and not isinstance(spec[leaf], Mapping):
            return normalize_include_limit(spec[leaf])

        return normalize_include_limit(self.default)
