import numpy as np

from conftest import png_data_url, rgba_image
from modules.background import border_sample_regions, detect_background_color
from modules.image_io import PixelBuffer
from modules.mask import Rect


def test_white_border_is_white(white_100):
    assert detect_background_color(PixelBuffer(white_100), Rect(40, 45, 20, 10)) == '#ffffff'


def test_accepts_encoded_image(red_blue_100):
    assert detect_background_color(png_data_url(red_blue_100), {'x': 10, 'y': 40, 'width': 20, 'height': 10}) == '#ff0000'


def test_fully_transparent_defaults_to_white():
    pixels = rgba_image(50, 50, (0, 0, 0, 0))
    assert detect_background_color(PixelBuffer(pixels), Rect(20, 20, 10, 10)) == '#ffffff'


def test_zero_size_region_outside_image_defaults_to_white():
    pixels = rgba_image(20, 20, (0, 0, 0, 255))
    assert detect_background_color(PixelBuffer(pixels), Rect(200, 200, 0, 0)) == '#ffffff'


def test_small_image_does_not_index_out_of_range():
    # 이미지가 샘플 두께보다 작으면 클램프된 띠 좌표가 음수가 된다
    pixels = rgba_image(5, 5, (0, 0, 0, 255))
    assert detect_background_color(PixelBuffer(pixels), Rect(1, 1, 2, 2)) == '#000000'


def test_text_inside_region_is_ignored():
    pixels = rgba_image(100, 100, (128, 128, 128, 255))
    pixels[45:55, 40:60] = (0, 0, 0, 255)
    assert detect_background_color(PixelBuffer(pixels), Rect(40, 45, 20, 10)) == '#808080'


def test_alpha_threshold():
    pixels = rgba_image(40, 40, (0, 0, 255, 127))
    assert detect_background_color(PixelBuffer(pixels), Rect(15, 15, 10, 10)) == '#ffffff'
    pixels[..., 3] = 128
    assert detect_background_color(PixelBuffer(pixels), Rect(15, 15, 10, 10)) == '#0000ff'


def test_colors_are_quantized():
    pixels = rgba_image(40, 40, (250, 10, 130, 255))
    assert detect_background_color(PixelBuffer(pixels), Rect(15, 15, 10, 10)) == '#ff1080'


def test_majority_wins():
    pixels = rgba_image(40, 40, (0, 255, 0, 255))
    # 오른쪽 띠만 빨강
    pixels[:, 25:] = (255, 0, 0, 255)
    assert detect_background_color(PixelBuffer(pixels), Rect(15, 15, 10, 10)) == '#00ff00'


def _tie_image(first, second):
    # 30x30, 영역 (10, 10, 10, 10): 상단/좌측 띠 400px, 하단/우측 띠 400px
    pixels = rgba_image(30, 30, (255, 0, 0, 255))
    pixels[0:10, :] = first
    pixels[10:20, 0:10] = first
    pixels[20:30, :] = second
    pixels[10:20, 20:30] = second
    return PixelBuffer(pixels)


def test_tie_goes_to_first_encountered_color():
    region = Rect(10, 10, 10, 10)
    green, blue = (0, 255, 0, 255), (0, 0, 255, 255)
    assert detect_background_color(_tie_image(green, blue), region) == '#00ff00'
    assert detect_background_color(_tie_image(blue, green), region) == '#0000ff'


def test_border_sample_regions_layout():
    top, bottom, left, right = border_sample_regions(Rect(40, 45, 20, 10), 100, 100)
    assert top == Rect(30, 35, 40, 10)
    assert bottom == Rect(30, 55, 40, 10)
    assert left == Rect(30, 45, 10, 10)
    assert right == Rect(60, 45, 10, 10)


def test_border_sample_regions_clamped_at_edges():
    top, bottom, left, right = border_sample_regions(Rect(95, 95, 5, 5), 100, 100)
    assert bottom.y == 90
    assert right.x == 90
    assert top.x == 85 and top.y == 85


def test_estimation_does_not_modify_buffer(red_blue_100):
    before = red_blue_100.copy()
    detect_background_color(PixelBuffer(red_blue_100), Rect(45, 45, 10, 10))
    np.testing.assert_array_equal(red_blue_100, before)


def test_custom_default_color_when_no_samples():
    pixels = rgba_image(50, 50, (0, 0, 0, 0))
    assert detect_background_color(PixelBuffer(pixels), Rect(20, 20, 10, 10), default_color='#000000') == '#000000'
