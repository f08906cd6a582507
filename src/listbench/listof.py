"""Single-element sequence constructors compared by the ``listbench`` suite."""

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

EMPTY_LIST: Sequence = ()
"""The shared empty sequence returned by ``listof_vararg()`` when called without arguments."""


def listof(element: T) -> Sequence[T]:
    """
    Wrap a single element using the general-purpose list constructor.

    The result is a fresh ``list``, typed as a read-only ``Sequence``. Callers must
    not mutate it, although nothing stops them: unlike ``listof_vararg()``, whose
    tuples are immutable, this does not pay for an immutable copy.
    """
    return [element]


def listof_vararg(*elements: T) -> Sequence[T]:
    """
    Wrap any number of elements captured as variadic arguments.

    The argument tuple is returned as the result sequence, in call order.
    An empty call returns ``EMPTY_LIST`` without allocating a new sequence.

    Examples
    --------
    >>> listof_vararg(1)
    (1,)
    >>> listof_vararg(1, 2, 3)
    (1, 2, 3)
    >>> listof_vararg() is EMPTY_LIST
    True
    """
    if len(elements) > 0:
        return elements
    return EMPTY_LIST
