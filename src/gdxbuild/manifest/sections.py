"""Section-based document model used for .gdextension manifests.

A document is an ordered mapping from Heading to an ordered body of
``key -> value`` entries. Order is preserved for output; equality ignores it:
two headings are equal when their names match and their properties match
value-for-value, whatever order the properties were declared in.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union


def _freeze(value: Any) -> Any:
    """Hashable, order-independent form of a heading property value.

    Scalars are tagged with their type so that True and 1 stay distinct.
    """
    if isinstance(value, Mapping):
        return frozenset((key, _freeze(item)) for key, item in value.items())
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return (type(value).__name__, value)


class Heading:
    """Section heading: a name plus optional ordered properties.

    Rendered as ``[name]`` or ``[name key=value, key=value]``.
    """

    __slots__ = ("name", "_properties", "_frozen")

    def __init__(self, name: str, properties: Optional[Mapping[str, Any]] = None):
        self.name = name
        self._properties: Dict[str, Any] = dict(properties or {})
        self._frozen = _freeze(self._properties)

    @property
    def properties(self) -> Mapping[str, Any]:
        """Read-only view of the properties in declaration order."""
        return MappingProxyType(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Heading):
            return NotImplemented
        return self.name == other.name and self._frozen == other._frozen

    def __hash__(self) -> int:
        return hash((self.name, self._frozen))

    def __repr__(self) -> str:
        if not self._properties:
            return f"Heading({self.name!r})"
        return f"Heading({self.name!r}, {self._properties!r})"


HeadingLike = Union[Heading, str]


def as_heading(heading: HeadingLike) -> Heading:
    return heading if isinstance(heading, Heading) else Heading(heading)


class SectionDocument:
    """Ordered collection of ``Heading -> body`` sections.

    Adding a section under an existing heading replaces its body in place.
    """

    def __init__(self, sections: Iterable[Tuple[HeadingLike, Mapping[str, Any]]] = ()):
        self._sections: Dict[Heading, Dict[str, Any]] = {}
        for heading, body in sections:
            self.add(heading, body)

    def add(self, heading: HeadingLike, body: Mapping[str, Any]) -> None:
        self._sections[as_heading(heading)] = dict(body)

    def headings(self) -> list:
        return list(self._sections)

    def items(self) -> Iterator[Tuple[Heading, Dict[str, Any]]]:
        return iter(self._sections.items())

    def __getitem__(self, heading: HeadingLike) -> Dict[str, Any]:
        return self._sections[as_heading(heading)]

    def __contains__(self, heading: object) -> bool:
        if isinstance(heading, (Heading, str)):
            return as_heading(heading) in self._sections
        return False

    def __iter__(self) -> Iterator[Heading]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SectionDocument):
            return NotImplemented
        return self._sections == other._sections

    def __repr__(self) -> str:
        return f"SectionDocument({list(self._sections.items())!r})"
