# spatial_grid.py

import logging
import numpy as np
import numba

from constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


@numba.jit(nopython=True)
def _cell_of_jit(x, y, cell_size, grid_width, grid_height):
    """Maps a position to its (column, row), clamped to the grid."""
    col = int(x / cell_size)
    row = int(y / cell_size)
    if col < 0:
        col = 0
    elif col >= grid_width:
        col = grid_width - 1
    if row < 0:
        row = 0
    elif row >= grid_height:
        row = grid_height - 1
    return col, row


class SpatialIndex:
    """
    Uniform hash grid over the viewport with cells the size of the interaction
    radius, so every partner within range lives in the 3x3 block around a spark.

    Data Contract:
    - Inputs: cell_size (float), width/height (float) of the viewport.
    - Outputs: neighbors_of(spark) -> list of sparks in the surrounding 3x3 cells.
    - Invariants: Rebuilt from scratch every frame. Sparks may cross several
      cells per frame, so the grid is never updated incrementally.
    """
    def __init__(self, cell_size: float, width: float, height: float):
        self.cell_size = cell_size
        self.cells = {}
        self.resize(width, height)

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height
        self.grid_width = max(1, int(np.ceil(width / self.cell_size)))
        self.grid_height = max(1, int(np.ceil(height / self.cell_size)))
        self.cells.clear()
        logger.debug(f"Spatial grid sized to {self.grid_width}x{self.grid_height} cells of {self.cell_size}px.")

    def clear(self):
        self.cells.clear()

    def cell_of(self, spark):
        return _cell_of_jit(float(spark.x), float(spark.y), self.cell_size, self.grid_width, self.grid_height)

    def insert(self, spark):
        cell = self.cell_of(spark)
        bucket = self.cells.get(cell)
        if bucket is None:
            self.cells[cell] = [spark]
        else:
            bucket.append(spark)

    def rebuild(self, sparks):
        """O(n) clear-and-insert of the whole population."""
        self.clear()
        for spark in sparks:
            self.insert(spark)

    def neighbors_of(self, spark):
        """
        Returns every other spark in the 3x3 block of cells centered on the
        spark's own cell. Pairs still need de-duplication by the caller.
        """
        cell_x, cell_y = self.cell_of(spark)
        neighbors = []
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                check_x, check_y = cell_x + dx, cell_y + dy
                if 0 <= check_x < self.grid_width and 0 <= check_y < self.grid_height:
                    bucket = self.cells.get((check_x, check_y))
                    if bucket:
                        neighbors.extend(other for other in bucket if other is not spark)
        return neighbors

    def __len__(self):
        return sum(len(bucket) for bucket in self.cells.values())
