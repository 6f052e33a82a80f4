"""Registry of built-in training sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, MutableMapping

from ..core.types import DataPoint


@dataclass(frozen=True)
class DatasetSpec:
    """A named training set and where it came from.

    Attributes
    ----------
    name:
        Registry key the dataset was built from.
    points:
        The records, in presentation order.
    provenance:
        Free-form metadata written to the run manifest.
    """

    name: str
    points: List[DataPoint]
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.points[0].input.shape[0])

    @property
    def d_out(self) -> int:
        return int(self.points[0].expected_output.shape[0])


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...

    or directly::

        register_dataset("xor", make_xor)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` registered under ``dataset``."""

    if dataset not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {dataset!r}. Available datasets: {available}")
    spec = _REGISTRY[dataset](**options)
    if not spec.points:
        raise ValueError(f"Dataset {dataset!r} produced no records")
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _truth_table(name: str, gate: Callable[[int, int], int]) -> DatasetFactory:
    def _factory(**_: object) -> DatasetSpec:
        points = [
            DataPoint(input=[a, b], expected_output=[gate(a, b)])
            for a in (0, 1)
            for b in (0, 1)
        ]
        return DatasetSpec(name=name, points=points, provenance={"type": "truth_table", "gate": name})

    return _factory


register_dataset("xor", _truth_table("xor", lambda a, b: a ^ b))
register_dataset("and", _truth_table("and", lambda a, b: a & b))
register_dataset("or", _truth_table("or", lambda a, b: a | b))
register_dataset("nand", _truth_table("nand", lambda a, b: 1 - (a & b)))


__all__ = ["DatasetSpec", "available_datasets", "get_dataset", "register_dataset"]
