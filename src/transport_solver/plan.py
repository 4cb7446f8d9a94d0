"""Dense allocation plan with an explicit basic-cell mask."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

CellIndex = tuple[int, int]


@dataclass
class TransportPlan:
    """Allocation matrix over providers (rows) and consumers (columns).

    A cell is *basic* when its mask entry is set, regardless of its value: a
    basic cell may carry zero flow to keep the basis a spanning tree. Non-basic
    cells always hold zero in ``values``.

    Attributes:
        values: Allocated quantities, shape (providers, consumers).
        basic: Boolean mask of basic cells, same shape.
    """

    values: NDArray[np.integer]
    basic: NDArray[np.bool_]

    @classmethod
    def empty(cls, rows: int, columns: int, dtype: np.dtype) -> TransportPlan:
        return cls(
            values=np.zeros((rows, columns), dtype=dtype),
            basic=np.zeros((rows, columns), dtype=bool),
        )

    @property
    def shape(self) -> tuple[int, int]:
        rows, columns = self.values.shape
        return rows, columns

    def is_basic(self, row: int, column: int) -> bool:
        return bool(self.basic[row, column])

    def get(self, row: int, column: int) -> int | None:
        if not self.basic[row, column]:
            return None
        return int(self.values[row, column])

    def set(self, row: int, column: int, value: int) -> None:
        self.values[row, column] = value
        self.basic[row, column] = True

    def clear(self, row: int, column: int) -> None:
        self.values[row, column] = 0
        self.basic[row, column] = False

    def basic_count(self) -> int:
        return int(np.count_nonzero(self.basic))

    def basic_cells(self) -> list[CellIndex]:
        """Return basic cells in row-major order."""
        rows, columns = np.nonzero(self.basic)
        return [(int(r), int(c)) for r, c in zip(rows, columns)]

    def is_degenerate(self) -> bool:
        rows, columns = self.shape
        return self.basic_count() < rows + columns - 1

    def objective(self, costs: NDArray[np.integer]) -> int:
        # Exact Python-int accumulation: the total may exceed the working dtype.
        return sum(
            int(cost) * int(value)
            for cost, value in zip(costs[self.basic], self.values[self.basic])
        )

    def copy(self) -> TransportPlan:
        return TransportPlan(values=self.values.copy(), basic=self.basic.copy())

    def state_key(self) -> tuple[bytes, bytes]:
        """Structural key identifying the plan content (values and basis)."""
        return self.values.tobytes(), self.basic.tobytes()

    def to_mapping(
        self,
        providers: Sequence[Hashable],
        consumers: Sequence[Hashable],
    ) -> dict[tuple[Hashable, Hashable], int]:
        return {
            (providers[row], consumers[column]): int(self.values[row, column])
            for row, column in self.basic_cells()
        }
