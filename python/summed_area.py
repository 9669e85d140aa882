#!/usr/bin/env python3
import numpy as np
from ppm_image import CHANNELS

# Holds 255 * W * H for any image that fits in memory
SAT_DTYPE = np.int64


class SummedAreaTable:
    """
    Sum of every pixel in the rectangle from (0, 0) to (row, col), inclusive.

    Built in two phases so each can be split across workers:
    accumulate_rows() writes only the rows it is given, accumulate_columns()
    only the columns it is given. Every row must be through phase 1 before
    any column starts phase 2.
    """

    def __init__(self, height, width):
        if height <= 0 or width <= 0:
            raise ValueError(f"Invalid table size {width}x{height}")
        self.sums = np.empty((height, width), dtype=SAT_DTYPE)
        self.height = height
        self.width = width

    def accumulate_rows(self, values, start_row, end_row):
        # Phase 1: running sum along each row
        np.cumsum(values[start_row:end_row], axis=1, dtype=SAT_DTYPE,
                  out=self.sums[start_row:end_row])

    def accumulate_columns(self, start_col, end_col):
        # Phase 2: top-to-bottom running sum of the row sums
        block = self.sums[:, start_col:end_col]
        np.cumsum(block, axis=0, out=block)

    def at(self, row, col):
        return int(self.sums[row, col])

    def total(self):
        return int(self.sums[-1, -1])


def build_tables(image):
    """Single-threaded construction of one table per channel."""
    height, width = image.height(), image.width()
    tables = []
    for c in range(CHANNELS):
        table = SummedAreaTable(height, width)
        table.accumulate_rows(image.channel(c), 0, height)
        table.accumulate_columns(0, width)
        tables.append(table)
    return tables
