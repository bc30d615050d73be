from __future__ import annotations

import functools
from typing import Any, Callable, Generic, Iterable, TypeVar, cast

_T = TypeVar("_T")


class lazyproperty(Generic[_T]):
    """Decorator like @property, but evaluated only on first access.

    The decorated method must take only `self`. Its value is computed on first access, cached in
    the instance `__dict__` under the method name, and returned from there on each later access.
    Because this is a data descriptor, `__get__()` still runs on every access so the cached value
    cannot be shadowed by assignment.

    A lazyproperty is read-only. Assigning to one raises AttributeError unconditionally, which is
    what keeps a document's derived attributes (its key, title, sections, ...) idempotent.

    Note a method that returns `None` is re-evaluated on each access since `None` doubles as the
    "not yet computed" marker.
    """

    def __init__(self, fget: Callable[..., _T]) -> None:
        self._fget = fget
        self._name = fget.__name__
        functools.update_wrapper(self, fget)  # pyright: ignore

    def __get__(self, obj: Any, type: Any = None) -> _T:
        # --- accessed on the class, e.g. `Obj.fget`, just return the descriptor ---
        if obj is None:
            return self  # type: ignore

        value = obj.__dict__.get(self._name)
        if value is None:
            value = self._fget(obj)
            obj.__dict__[self._name] = value
        return cast(_T, value)

    def __set__(self, obj: Any, value: Any) -> None:
        """Raises unconditionally, to preserve read-only behavior."""
        raise AttributeError("can't set attribute")


def only(it: Iterable[_T], error_cls: type[Exception] = ValueError, what: str = "item") -> _T:
    """Returns the only item of a singleton iterable.

    Raises `error_cls` when `it` is empty or holds more than one item.
    """
    items = list(it)
    if len(items) != 1:
        raise error_cls(f"Expected exactly 1 {what}, found {len(items)}.")
    return items[0]
