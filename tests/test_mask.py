from types import SimpleNamespace

import pytest

from modules.mask import Rect, expand_mask, to_rect


def test_expand_mask_default_padding():
    assert expand_mask(Rect(40, 45, 20, 10)) == Rect(35, 40, 30, 20)


@pytest.mark.parametrize('x, y', [(0, 0), (2, 3), (5, 5), (17, 90)])
@pytest.mark.parametrize('padding', [0, 3, 5, 12])
def test_expand_mask_bounds(x, y, padding):
    mask = Rect(x, y, 8, 4)
    expanded = expand_mask(mask, padding)
    assert expanded.x == max(0, x - padding)
    assert expanded.y == max(0, y - padding)
    assert expanded.width == mask.width + 2 * padding
    assert expanded.height == mask.height + 2 * padding


def test_expand_mask_at_edge_keeps_full_growth():
    # 좌상단이 0 으로 잘려도 크기 증가는 줄지 않는다
    expanded = expand_mask({'x': 1, 'y': 0, 'width': 10, 'height': 10}, 3)
    assert expanded == Rect(0, 0, 16, 16)


def test_to_rect_accepts_common_shapes():
    expected = Rect(1, 2, 3, 4)
    assert to_rect(expected) is expected
    assert to_rect({'x': 1, 'y': 2, 'width': 3, 'height': 4}) == expected
    assert to_rect({'bounds': {'x': 1, 'y': 2, 'width': 3, 'height': 4}}) == expected
    assert to_rect(SimpleNamespace(bounds={'x': 1.0, 'y': 2, 'width': 3, 'height': 4})) == expected
    assert to_rect((1, 2, 3, 4)) == expected


def test_to_rect_rejects_malformed():
    with pytest.raises(ValueError):
        to_rect({'x': 1, 'y': 2})
    with pytest.raises(ValueError):
        to_rect((1, 2, 3))


def test_clip():
    assert Rect(-5, -5, 10, 10).clip(20, 20) == (0, 0, 5, 5)
    assert Rect(15, 15, 10, 10).clip(20, 20) == (15, 15, 20, 20)
    assert Rect(25, 0, 10, 10).clip(20, 20) is None
    assert Rect(0, 0, 0, 10).clip(20, 20) is None
