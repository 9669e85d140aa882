import numpy as np
import pytest
from blur_helpers import random_image
from ppm_image import PixelImage
from summed_area import SummedAreaTable, build_tables


def test_table_holds_rectangle_sums(rng):
    image = random_image(rng, 7, 5)
    tables = build_tables(image)
    for c, table in enumerate(tables):
        values = image.pixels[:, :, c].astype(np.int64)
        for row in range(5):
            for col in range(7):
                assert table.at(row, col) == values[:row + 1, :col + 1].sum()


def test_total_is_channel_sum(rng):
    image = random_image(rng, 13, 9)
    for c, table in enumerate(build_tables(image)):
        assert table.total() == int(image.pixels[:, :, c].sum(dtype=np.int64))


def test_saturated_image_does_not_overflow():
    image = PixelImage.create(300, 200)
    image.clear(255, 255, 255)
    for table in build_tables(image):
        assert table.total() == 255 * 300 * 200


def test_phases_split_into_chunks_match_single_pass(rng):
    image = random_image(rng, 10, 6)
    values = image.channel(1)
    table = SummedAreaTable(6, 10)
    for start in range(0, 6, 4):
        table.accumulate_rows(values, start, min(start + 4, 6))
    # Row phase only: running sums along each row
    np.testing.assert_array_equal(table.sums, np.cumsum(values, axis=1))
    for start in range(0, 10, 3):
        table.accumulate_columns(start, min(start + 3, 10))
    np.testing.assert_array_equal(table.sums, build_tables(image)[1].sums)


def test_single_pixel_table():
    image = PixelImage.create(1, 1)
    image.set_channel(0, 0, 2, 200)
    tables = build_tables(image)
    assert [t.total() for t in tables] == [0, 0, 200]


@pytest.mark.parametrize("height, width", [(0, 3), (3, 0), (-1, 2)])
def test_invalid_size_rejected(height, width):
    with pytest.raises(ValueError):
        SummedAreaTable(height, width)
