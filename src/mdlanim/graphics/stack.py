"""
Coordinate System Stack
=======================
The stack of composed transforms that defines where shapes are drawn.
The bottom entry is the identity; the top is the current coordinate
system.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from mdlanim.errors import StackUnderflowError
from mdlanim.graphics.matrix import compose, identity

if TYPE_CHECKING:
    import numpy.typing as npt


class TransformStack:
    """
    Stack of owned 4x4 matrices. Entries are never shared: ``push`` stores
    a copy of the top and ``apply`` stores a new product.
    """

    def __init__(self) -> None:
        self._frames: list[npt.NDArray[np.float64]] = [identity()]

    def push(self) -> None:
        self._frames.append(self._frames[-1].copy())

    def pop(self) -> npt.NDArray[np.float64]:
        if len(self._frames) <= 1:
            raise StackUnderflowError("pop without a matching push: the base coordinate system cannot be removed.")
        return self._frames.pop()

    def top(self) -> npt.NDArray[np.float64]:
        """Current coordinate system (read-only view)."""
        view = self._frames[-1].view()
        view.flags.writeable = False
        return view

    def apply(self, transform: npt.NDArray[np.float64]) -> None:
        """Make ``top · transform`` the current coordinate system."""
        self._frames[-1] = compose(self._frames[-1], transform)

    def reset(self) -> None:
        self._frames = [identity()]

    @property
    def depth(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)
