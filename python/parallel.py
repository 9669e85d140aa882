#!/usr/bin/env python3


def partition(total, chunk_size):
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")
    for start in range(0, total, chunk_size):
        yield start, min(start + chunk_size, total)


def parallel_for(executor, total, chunk_size, fn):
    """
    Call fn(start, end) for consecutive chunks of [0, total) on the executor.

    Returns only once every chunk has finished, so it doubles as the barrier
    between stages. The first exception raised by a chunk is re-raised here.
    """
    futures = [executor.submit(fn, start, end) for start, end in partition(total, chunk_size)]
    errors = []
    for future in futures:
        error = future.exception()
        if error is not None:
            errors.append(error)
    if errors:
        raise errors[0]
