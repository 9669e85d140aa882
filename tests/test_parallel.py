import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from parallel import parallel_for, partition


def test_partition_covers_range():
    assert list(partition(10, 4)) == [(0, 4), (4, 8), (8, 10)]
    assert list(partition(3, 5)) == [(0, 3)]
    assert list(partition(0, 4)) == []


def test_partition_rejects_bad_chunk_size():
    with pytest.raises(ValueError):
        list(partition(10, 0))


def test_parallel_for_visits_every_index_once():
    seen = []
    lock = threading.Lock()

    def visit(start, end):
        with lock:
            seen.extend(range(start, end))

    with ThreadPoolExecutor(max_workers=4) as executor:
        parallel_for(executor, 37, 3, visit)
    assert sorted(seen) == list(range(37))


def test_parallel_for_waits_for_all_chunks():
    finished = []
    release = threading.Event()

    def slow(start, end):
        release.wait(timeout=5)
        finished.append(start)

    with ThreadPoolExecutor(max_workers=2) as executor:
        timer = threading.Timer(0.05, release.set)
        timer.start()
        parallel_for(executor, 6, 2, slow)
        assert sorted(finished) == [0, 2, 4]


def test_parallel_for_reraises_worker_error():
    def boom(start, end):
        if start == 2:
            raise RuntimeError("chunk failed")

    with ThreadPoolExecutor(max_workers=2) as executor:
        with pytest.raises(RuntimeError, match="chunk failed"):
            parallel_for(executor, 6, 2, boom)
