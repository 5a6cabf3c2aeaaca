"""Revision tree positions and sub_id allocation.

A revision's ``sub_id`` is a dash-separated string such as ``a-0``, ``a-1``
or ``a-1-2``. The first segment labels the root, the first number is the
generation on the main line, and each further number is a generation on a
branch forked off the path before it. Mode anchors (``precise-...``,
``balanced-...``, ``creative-...``) are fixed nodes that never advance.

Strings only exist at the storage boundary: ``RevisionPath.parse`` turns
them into tagged paths and ``str(path)`` turns them back. Allocation is a
pure function over the sibling set, with no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

MODE_PREFIXES = ("precise-", "balanced-", "creative-")


@dataclass(frozen=True)
class Named:
    """Fixed mode anchor. Serialized as its tag."""
    tag: str

    def __str__(self) -> str:
        return self.tag


@dataclass(frozen=True)
class Root:
    """Non-numeric head of a path (``a`` in ``a-1-2``). Acts as generation 0."""
    label: str

    def __str__(self) -> str:
        return self.label

    def next(self) -> "Sequential":
        return Sequential(self, 1)


@dataclass(frozen=True)
class Sequential:
    """Generation ``n`` on the main line below a root."""
    parent: Root
    n: int

    def __str__(self) -> str:
        return f"{self.parent}-{self.n}"

    def next(self) -> "Sequential":
        return Sequential(self.parent, self.n + 1)

    def branch(self, n: int) -> "Branch":
        return Branch(self, n)


@dataclass(frozen=True)
class Branch:
    """Generation ``n`` on a branch forked off ``parent``."""
    parent: Union[Sequential, "Branch"]
    n: int

    def __str__(self) -> str:
        return f"{self.parent}-{self.n}"

    def next(self) -> "Branch":
        return Branch(self.parent, self.n + 1)

    def branch(self, n: int) -> "Branch":
        return Branch(self, n)


RevisionPath = Union[Named, Root, Sequential, Branch]


def is_named(sub_id: str) -> bool:
    """True for mode anchors, which are stored verbatim and never advanced."""
    return sub_id.startswith(MODE_PREFIXES)


def parse(raw: str) -> RevisionPath:
    """Parse a stored ``sub_id``.

    The trailing segment is the generation counter; a non-numeric trailing
    segment counts as generation 0. A string without any dash is a bare root.
    """
    if is_named(raw):
        return Named(raw)

    head, sep, tail = raw.rpartition("-")
    if not sep:
        return Root(raw)

    n = int(tail) if tail.isdigit() else 0
    return _attach(_parse_base(head), n)


def _parse_base(head: str) -> Union[Root, Sequential, Branch]:
    # Non-numeric segments stay verbatim inside the root label.
    tokens = head.split("-")
    split_at = len(tokens)
    while split_at > 1 and tokens[split_at - 1].isdigit():
        split_at -= 1

    node: Union[Root, Sequential, Branch] = Root("-".join(tokens[:split_at]))
    for token in tokens[split_at:]:
        node = _attach(node, int(token))
    return node


def _attach(parent: Union[Root, Sequential, Branch], n: int) -> Union[Sequential, Branch]:
    if isinstance(parent, Root):
        return Sequential(parent, n)
    return Branch(parent, n)


def _numeric_key(segments: str) -> tuple:
    return tuple(int(s) if s.isdigit() else 0 for s in segments.split("-"))


def allocate_sub_id(parent_sub_id: str, existing_sub_ids: Iterable[str]) -> str:
    """Compute the ``sub_id`` for a new revision created from ``parent_sub_id``.

    Args:
        parent_sub_id: Tree position the new revision descends from.
        existing_sub_ids: Every ``sub_id`` already used in the same UI.

    Returns:
        The parent itself for mode anchors. Otherwise the next generation on
        the parent's line when it is free. When it is taken, the greatest
        existing id below that generation (at any depth) with its last
        segment incremented, or a first branch off it if there is none.
        Ids are compared segment by segment as numbers, so ``a-1-10``
        ranks above ``a-1-9``.
    """
    parent = parse(parent_sub_id)
    if isinstance(parent, Named):
        return str(parent)

    existing = set(existing_sub_ids)
    candidate = parent.next()
    if str(candidate) not in existing:
        return str(candidate)

    prefix = f"{candidate}-"
    descendants = [sub_id for sub_id in existing if sub_id.startswith(prefix)]
    if not descendants:
        return str(candidate.branch(1))

    greatest = max(descendants, key=lambda sub_id: _numeric_key(sub_id[len(prefix):]))
    return str(parse(greatest).next())
