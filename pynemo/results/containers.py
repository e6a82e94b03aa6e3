# pynemo/results/containers.py

"""
Result container adapters.

A result container has an ordered ``dimensions`` sequence and exposes its
entries two ways:

- ``items()`` yields ``(index_tuple, value)`` pairs, for serial reads;
- ``keys()`` lists the raw index keys and ``value(key)`` reads one entry,
  so parallel readers can each take a slice of the index space.

``value`` returns None for entries without a value; those are not saved.
Solver-side objects are wrapped in one of the adapters below:

- MappingResult: a plain ``dict`` keyed by index tuples (or scalars).
- PyomoResult: an indexed Pyomo ``Var``, ``Param`` or ``Expression``.
"""

from typing import Any, Hashable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

import pyomo.environ as pyo
from pyomo.core.base.component import Component


@runtime_checkable
class ResultContainer(Protocol):
    """Indexed result quantity, as read by the persister."""

    @property
    def dimensions(self) -> Sequence[str]:
        ...

    def keys(self) -> List[Any]:
        ...

    def value(self, key: Any) -> Optional[float]:
        ...

    def items(self) -> Iterator[Tuple[Tuple[Hashable, ...], float]]:
        ...


def index_tuple(key: Any) -> Tuple[Hashable, ...]:
    """
    Normalize a container key to an index tuple.

    Examples
    --------
    >>> index_tuple(None), index_tuple("R1"), index_tuple(("R1", "T1"))
    ((), ('R1',), ('R1', 'T1'))
    """
    if key is None:
        return ()
    if isinstance(key, tuple):
        return key
    return (key,)


class MappingResult:
    """
    Result held in a plain mapping.

    Parameters
    ----------
    dimensions : sequence of str
        Dimension names, e.g. ``['r', 't', 'y']``.
    mapping : Mapping
        Index tuple (or scalar, for one dimension) -> value.

    Raises
    ------
    ValueError
        If a key does not have one entry per dimension.
    """

    def __init__(self, dimensions: Sequence[str], mapping: Mapping[Any, float]):
        self._dimensions = tuple(dimensions)
        self._mapping = mapping
        for key in mapping:
            if len(index_tuple(key)) != len(self._dimensions):
                raise ValueError(
                    f"Index {key!r} does not match dimensions {list(self._dimensions)}"
                )

    @property
    def dimensions(self) -> Sequence[str]:
        return self._dimensions

    def keys(self) -> List[Any]:
        return list(self._mapping.keys())

    def value(self, key: Any) -> Optional[float]:
        return self._mapping[key]

    def items(self) -> Iterator[Tuple[Tuple[Hashable, ...], float]]:
        for key, value in self._mapping.items():
            yield index_tuple(key), value

    def __len__(self) -> int:
        return len(self._mapping)


class PyomoResult:
    """
    Result read from a Pyomo component after a solve.

    Entries whose value is undefined (e.g. variables never assigned) are
    skipped.

    Parameters
    ----------
    component : pyomo Var, Param or Expression
        Indexed (or scalar) model component.
    dimensions : sequence of str
        Dimension names, one per index position.
    """

    def __init__(self, component: Component, dimensions: Sequence[str]):
        self.component = component
        self._dimensions = tuple(dimensions)

    @property
    def dimensions(self) -> Sequence[str]:
        return self._dimensions

    def keys(self) -> List[Any]:
        return list(self.component.keys())

    def value(self, key: Any) -> Optional[float]:
        return pyo.value(self.component[key], exception=False)

    def items(self) -> Iterator[Tuple[Tuple[Hashable, ...], float]]:
        for key, data in self.component.items():
            value = pyo.value(data, exception=False)
            if value is None:
                continue
            yield index_tuple(key), value


def as_container(obj: Any, dimensions: Sequence[str]) -> ResultContainer:
    """
    Wrap a raw result in the matching adapter.

    Objects already satisfying ResultContainer are returned unchanged.

    Raises
    ------
    TypeError
        If `obj` is neither a mapping nor a Pyomo component.
    """
    if isinstance(obj, (MappingResult, PyomoResult)):
        return obj
    if isinstance(obj, Component):
        return PyomoResult(obj, dimensions)
    if isinstance(obj, Mapping):
        return MappingResult(dimensions, obj)
    if isinstance(obj, ResultContainer):
        return obj
    raise TypeError(f"Cannot persist object of type {type(obj).__name__}")
