from __future__ import annotations

import pytest

from glowup.pagination import PageSlice, paginate, scale_factor


def _offsets(slices: list[PageSlice]) -> list[float]:
    return [page.source_y_offset for page in slices]


def test_partial_last_page() -> None:
    slices = paginate(700, 210, 210, 295)

    assert _offsets(slices) == [0, -295, -590]
    assert [page.dest_page_index for page in slices] == [0, 1, 2]


def test_exact_multiple_drops_blank_trailing_page_by_default() -> None:
    slices = paginate(590, 210, 210, 295)

    assert _offsets(slices) == [0, -295]


def test_exact_multiple_keeps_blank_trailing_page_when_asked() -> None:
    slices = paginate(590, 210, 210, 295, keep_trailing_blank_page=True)

    assert _offsets(slices) == [0, -295, -590]


def test_short_source_fits_on_one_page() -> None:
    slices = paginate(100, 210, 210, 295)

    assert _offsets(slices) == [0]


def test_source_is_scaled_to_page_width() -> None:
    # 800 px wide, 2000 px tall -> 210 x 525 after scaling
    slices = paginate(2000, 800, 210, 295, image="report.png")

    assert scale_factor(800, 210) == pytest.approx(0.2625)
    assert _offsets(slices) == [0, -295]
    for page in slices:
        assert page.source_image == "report.png"
        assert page.width == 210
        assert page.height == pytest.approx(525)


def test_scaled_exact_multiple_is_detected_despite_float_error() -> None:
    # 3 * 295 = 885 scaled height, produced through a non-trivial factor
    slices = paginate(885 * 3, 210 * 3, 210, 295)

    assert len(slices) == 3
    assert len(paginate(885 * 3, 210 * 3, 210, 295, keep_trailing_blank_page=True)) == 4


def test_pages_cover_the_image_without_gaps() -> None:
    page_height = 297.0
    slices = paginate(4321, 1000, 210, page_height)
    scaled_height = slices[0].height

    covered = [(-page.source_y_offset, -page.source_y_offset + page_height) for page in slices]
    for (_, end), (start, _) in zip(covered, covered[1:]):
        assert start == pytest.approx(end)
    assert covered[-1][1] >= scaled_height
    assert covered[-1][0] < scaled_height


@pytest.mark.parametrize(
    "dimensions",
    [(0, 210, 210, 295), (700, 0, 210, 295), (700, 210, 0, 295), (700, 210, 210, 0), (-1, 210, 210, 295)],
)
def test_invalid_dimensions_raise(dimensions: tuple[float, float, float, float]) -> None:
    with pytest.raises(ValueError):
        paginate(*dimensions)
