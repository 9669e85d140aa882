#!/usr/bin/env python3
from collections import namedtuple
import numpy as np

BoundingBox = namedtuple('BoundingBox', ['x_min', 'x_max', 'y_min', 'y_max'])


def bounding_box(row, col, radius, width, height):
    return BoundingBox(
        x_min=max(col - radius, 0),
        x_max=min(col + radius, width - 1),
        y_min=max(row - radius, 0),
        y_max=min(row + radius, height - 1),
    )


def pixel_count(box):
    return (box.x_max - box.x_min + 1) * (box.y_max - box.y_min + 1)


def window_sum(table, box):
    """
    Sum of the pixels inside box using four corner lookups:

        0      x_min    x_max
      0 +------+--------+
        |  a   |   b    |
        +------+--------+ y_min
        |  c   |   d    |
        +------+--------+ y_max

    where each letter names the table value at that corner, i.e. the sum of
    everything above and to the left of it. The box is d - b - c + a.
    """
    a = 0 if box.y_min == 0 or box.x_min == 0 else table.at(box.y_min - 1, box.x_min - 1)
    b = 0 if box.y_min == 0 else table.at(box.y_min - 1, box.x_max)
    c = 0 if box.x_min == 0 else table.at(box.y_max, box.x_min - 1)
    d = table.at(box.y_max, box.x_max)
    return d - b - c + a


def truncate_average(total, count):
    # float32 division truncated toward zero, never rounded
    return int(np.float32(total) / np.float32(count))


def window_average(tables, row, col, channel, radius):
    """Blurred value of one channel of the pixel at (row, col); the per-pixel reference for average_rows()."""
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")
    table = tables[channel]
    box = bounding_box(row, col, radius, table.width, table.height)
    return truncate_average(window_sum(table, box), pixel_count(box))


def _clamped_bounds(positions, radius, size):
    return np.maximum(positions - radius, 0), np.minimum(positions + radius, size - 1)


def average_rows(table, radius, start_row, end_row):
    """
    window_average() for every pixel of rows [start_row, end_row) of one
    channel, as a (end_row - start_row, width) uint8 array.
    """
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")
    # Any radius past the image edge clamps to the same window
    radius = min(radius, max(table.width, table.height))
    sums = table.sums

    x_min, x_max = _clamped_bounds(np.arange(table.width), radius, table.width)
    y_min, y_max = _clamped_bounds(np.arange(start_row, end_row), radius, table.height)

    # Index -1 wraps around; those lookups are masked out below
    top = (y_min > 0)[:, None]
    left = (x_min > 0)[None, :]
    a = np.where(top & left, sums[np.ix_(y_min - 1, x_min - 1)], 0)
    b = np.where(top, sums[np.ix_(y_min - 1, x_max)], 0)
    c = np.where(left, sums[np.ix_(y_max, x_min - 1)], 0)
    d = sums[np.ix_(y_max, x_max)]

    counts = np.outer(y_max - y_min + 1, x_max - x_min + 1)
    totals = d - b - c + a
    return (totals.astype(np.float32) / counts.astype(np.float32)).astype(np.uint8)
