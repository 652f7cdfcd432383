import pytest

from modules.color_utils import hex_to_rgb, parse_fill_color, quantize_color, rgb_to_hex


def test_quantize_extremes():
    assert quantize_color(0, 0, 0) == '#000000'
    assert quantize_color(255, 255, 255) == '#ffffff'


def test_quantize_rounds_half_up():
    assert quantize_color(8, 8, 8) == '#101010'
    assert quantize_color(7, 7, 7) == '#000000'
    assert quantize_color(24, 40, 56) == '#203040'


def test_quantize_clamps_to_255():
    # 250 / 16 -> 16 * 16 = 256
    assert quantize_color(250, 10, 130) == '#ff1080'


@pytest.mark.parametrize('step', [1, 7, 16, 32, 50])
def test_quantize_channels_are_step_multiples(step):
    for value in range(0, 256, 3):
        color = quantize_color(value, 255 - value, value // 2, step)
        assert len(color) == 7 and color.startswith('#')
        for channel in hex_to_rgb(color):
            assert 0 <= channel <= 255
            assert channel % step == 0 or channel == 255


def test_quantize_is_idempotent():
    for value in range(0, 256, 5):
        once = hex_to_rgb(quantize_color(value, value, value))
        assert quantize_color(*once) == quantize_color(value, value, value)


def test_quantize_rejects_non_positive_step():
    with pytest.raises(ValueError):
        quantize_color(1, 2, 3, step=0)


def test_hex_roundtrip_helpers():
    assert rgb_to_hex(18, 52, 86) == '#123456'
    assert hex_to_rgb('#123456') == (18, 52, 86)
    with pytest.raises(ValueError):
        hex_to_rgb('#fff')


@pytest.mark.parametrize('value, expected', [
    ('#ffffff', (255, 255, 255, 255)),
    ('#0f0', (0, 255, 0, 255)),
    ('red', (255, 0, 0, 255)),
    ('rgb(1, 2, 3)', (1, 2, 3, 255)),
    ((10, 20, 30), (10, 20, 30, 255)),
    ((10, 20, 30, 40), (10, 20, 30, 40)),
])
def test_parse_fill_color(value, expected):
    assert parse_fill_color(value) == expected


@pytest.mark.parametrize('value', ['not-a-color', '#12345', (1, 2), None])
def test_parse_fill_color_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_fill_color(value)
