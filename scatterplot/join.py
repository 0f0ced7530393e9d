from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar

from scatterplot.errors import PlotDataError


K = TypeVar("K", bound=Hashable)
D = TypeVar("D")
N = TypeVar("N")


@dataclass(frozen=True)
class KeyedJoin(Generic[K, D, N]):
    enter: list[tuple[K, D]]
    update: list[tuple[K, D, N]]
    exit: list[tuple[K, N]]


def unique_keys(data: Iterable[D], key: Callable[[D], K]) -> list[K]:
    """Keys of ``data`` in order; a repeated key raises ``PlotDataError``."""
    keys: list[K] = []
    seen: set[K] = set()
    for datum in data:
        k = key(datum)
        if k in seen:
            raise PlotDataError(f"duplicate key in data: {k!r}")
        seen.add(k)
        keys.append(k)
    return keys


def keyed_join(previous: Mapping[K, N], data: Iterable[D], key: Callable[[D], K]) -> KeyedJoin[K, D, N]:
    """Split ``data`` against already-bound nodes by key equality.

    ``enter`` holds data with no bound node, ``update`` pairs data with the node
    bound to the same key, and ``exit`` holds nodes whose key disappeared.
    Enter/update keep data order; exit keeps the order of ``previous``.
    """
    items = list(data)
    keys = unique_keys(items, key)
    enter: list[tuple[K, D]] = []
    update: list[tuple[K, D, N]] = []
    for k, datum in zip(keys, items):
        node = previous.get(k)
        if node is None:
            enter.append((k, datum))
        else:
            update.append((k, datum, node))
    seen = set(keys)
    exit_ = [(k, node) for k, node in previous.items() if k not in seen]
    return KeyedJoin(enter=enter, update=update, exit=exit_)
