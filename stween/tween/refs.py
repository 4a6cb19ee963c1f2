"""
Output targets for by-reference tweens.

A target is any object with ``get()`` and ``set(value)``. The registry reads
it once, to snapshot the start value, and writes to it on every advance. It
never owns the underlying storage.
"""
from __future__ import annotations

from typing import Any, Generic, MutableMapping, MutableSequence, Union

from stween.tween.types import T


class ValueRef(Generic[T]):
    """A mutable box holding a single value."""

    __slots__ = ("value",)

    def __init__(self, value: T):
        self.value = value

    def get(self) -> T:
        return self.value

    def set(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"ValueRef({self.value!r})"


class AttributeRef:
    """
    An attribute on a caller object.

    Writes go through a Qt-style setter when the object has one
    (``opacity`` -> ``setOpacity``), otherwise through setattr. Reads prefer
    a Qt-style getter (``opacity()``) and fall back to getattr.
    """

    def __init__(self, obj: Any, name: str):
        if not name:
            raise ValueError("AttributeRef requires an attribute name")
        self.obj = obj
        self.name = name
        self._setter_name = f"set{name[0].upper()}{name[1:]}"

    def get(self) -> Any:
        attr = getattr(self.obj, self.name)
        if callable(attr):
            return attr()
        return attr

    def set(self, value: Any) -> None:
        setter = getattr(self.obj, self._setter_name, None)
        if callable(setter):
            setter(value)
        else:
            setattr(self.obj, self.name, value)

    def __repr__(self) -> str:
        return f"AttributeRef({type(self.obj).__name__}.{self.name})"


class ItemRef:
    """A key in a mapping or an index in a sequence."""

    def __init__(self, container: Union[MutableMapping, MutableSequence], key: Any):
        self.container = container
        self.key = key

    def get(self) -> Any:
        return self.container[self.key]

    def set(self, value: Any) -> None:
        self.container[self.key] = value

    def __repr__(self) -> str:
        return f"ItemRef({type(self.container).__name__}[{self.key!r}])"
