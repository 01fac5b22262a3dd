"""Bijective category name <-> ID mapping for one categorical column."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType


class CategoryMapping:
    """
    Immutable bijection between category names and small integer IDs.

    Both directions are built once at construction and never mutated,
    so concurrent readers need no locking.

    Example:
        mapping = CategoryMapping({"yes": 0, "no": 1})
        mapping.id_of("no")   # 1
        mapping.name_of(0)    # "yes"
    """

    __slots__ = ("_name_to_id", "_id_to_name")

    def __init__(self, name_to_id: Mapping[str, int]) -> None:
        forward: dict[str, int] = {}
        inverse: dict[int, str] = {}
        for name, category_id in name_to_id.items():
            category_id = int(category_id)
            if category_id < 0:
                msg = f"Category ID must be non-negative, got {category_id} for {name!r}"
                raise ValueError(msg)
            if category_id in inverse:
                msg = (
                    f"Category ID {category_id} is assigned to both "
                    f"{inverse[category_id]!r} and {name!r}"
                )
                raise ValueError(msg)
            forward[str(name)] = category_id
            inverse[category_id] = str(name)
        self._name_to_id = MappingProxyType(forward)
        self._id_to_name = MappingProxyType(inverse)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "CategoryMapping":
        """Assign IDs 0..n-1 to names in iteration order."""
        return cls({name: category_id for category_id, name in enumerate(names)})

    def id_of(self, name: str) -> int | None:
        """Return the ID for a category name, or None if unknown."""
        return self._name_to_id.get(name)

    def name_of(self, category_id: int) -> str | None:
        """Return the name for a category ID, or None if unknown."""
        return self._id_to_name.get(category_id)

    @property
    def name_to_id(self) -> Mapping[str, int]:
        return self._name_to_id

    @property
    def inverse(self) -> Mapping[int, str]:
        """ID -> name view of the mapping."""
        return self._id_to_name

    def __len__(self) -> int:
        return len(self._name_to_id)

    def __contains__(self, name: object) -> bool:
        return name in self._name_to_id

    def __iter__(self) -> Iterator[str]:
        return iter(self._name_to_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategoryMapping):
            return NotImplemented
        return dict(self._name_to_id) == dict(other._name_to_id)

    def __hash__(self) -> int:
        return hash(frozenset(self._name_to_id.items()))

    def __repr__(self) -> str:
        return f"CategoryMapping({dict(self._name_to_id)!r})"

    def to_dict(self) -> dict[str, int]:
        """Plain name -> ID dict, for persistence."""
        return dict(self._name_to_id)
