#!/usr/bin/env python3
import time
from concurrent.futures import ThreadPoolExecutor

from parallel import parallel_for
from ppm_image import CHANNELS, PixelImage
from summed_area import SummedAreaTable
from window_average import average_rows

# Rows (or columns) per task; tuned on a quad-core i7, only affects speed
DEFAULT_CHUNK_SIZE = 4


def apply_box_blur(image, radius, num_workers, chunk_size=DEFAULT_CHUNK_SIZE, verbose=False):
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")
    if num_workers <= 0:
        raise ValueError(f"Worker count must be positive, got {num_workers}")
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")

    height, width = image.height(), image.width()
    channels = [image.channel(c) for c in range(CHANNELS)]
    tables = [SummedAreaTable(height, width) for _ in range(CHANNELS)]
    output = PixelImage.create(width, height)

    def row_sums(start_row, end_row):
        for values, table in zip(channels, tables):
            table.accumulate_rows(values, start_row, end_row)

    def column_sums(start_col, end_col):
        for table in tables:
            table.accumulate_columns(start_col, end_col)

    def blur_rows(start_row, end_row):
        for c, table in enumerate(tables):
            output.pixels[start_row:end_row, :, c] = average_rows(table, radius, start_row, end_row)

    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        start_time = time.time()
        parallel_for(executor, height, chunk_size, row_sums)
        parallel_for(executor, width, chunk_size, column_sums)
        sat_time = time.time() - start_time
        if verbose:
            print(f"SAT build time: {sat_time * 1000:.0f}ms")

        start_time = time.time()
        parallel_for(executor, height, chunk_size, blur_rows)
        average_time = time.time() - start_time
        if verbose:
            print(f"Averaging time: {average_time * 1000:.0f}ms")

    return output
