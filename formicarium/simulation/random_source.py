"""Uniform random streams consumed by ants.

Ants only ever need one thing from a random generator: a float in
``[0, 1)``.  Anything with a ``random()`` method qualifies, including
``numpy.random.Generator``.  ``ScriptedUniforms`` replays a fixed
sequence so movement decisions can be pinned down exactly.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol


class UniformSource(Protocol):
    """A stream of uniform samples in ``[0, 1)``."""

    def random(self) -> float: ...


class ScriptedUniforms:
    """Replay a fixed list of samples, cycling when exhausted.

    Args:
        values: Samples to return in order.  Each must lie in ``[0, 1)``.

    Raises:
        ValueError: If ``values`` is empty or holds a value outside ``[0, 1)``.
    """

    def __init__(self, values: Iterable[float]) -> None:
        self._values = [float(v) for v in values]
        if not self._values:
            msg = "ScriptedUniforms needs at least one value"
            raise ValueError(msg)
        for v in self._values:
            if not 0.0 <= v < 1.0:
                msg = f"uniform sample {v} outside [0, 1)"
                raise ValueError(msg)
        self._index = 0
        self.draws = 0

    def random(self) -> float:
        value = self._values[self._index]
        self._index = (self._index + 1) % len(self._values)
        self.draws += 1
        return value
