import base64
from io import BytesIO

import numpy as np
import pytest
from PIL import Image


def rgba_image(width, height, color=(255, 255, 255, 255)):
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :] = color
    return pixels


def png_bytes(pixels, fmt='PNG'):
    img = Image.fromarray(pixels)
    if fmt == 'JPEG':
        img = img.convert('RGB')
    out = BytesIO()
    img.save(out, format=fmt)
    return out.getvalue()


def png_base64(pixels):
    return base64.b64encode(png_bytes(pixels)).decode('ascii')


def png_data_url(pixels):
    return 'data:image/png;base64,' + png_base64(pixels)


@pytest.fixture
def white_100():
    return rgba_image(100, 100)


@pytest.fixture
def red_blue_100():
    """왼쪽 절반 빨강, 오른쪽 절반 파랑"""
    pixels = rgba_image(100, 100, (255, 0, 0, 255))
    pixels[:, 50:] = (0, 0, 255, 255)
    return pixels
