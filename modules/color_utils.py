"""
Color Utils Module
색상 양자화 및 HEX/RGB 변환
"""
import math
from typing import Tuple

from PIL import ImageColor


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """RGB 값을 HEX 색상(#rrggbb)으로 변환"""
    return '#{:02x}{:02x}{:02x}'.format(int(r), int(g), int(b))


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """HEX 색상을 RGB 튜플로 변환"""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"HEX 색상 형식이 아닙니다: #{hex_color}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def quantize_channel(value: int, step: int = 16) -> int:
    # Math.round 와 같은 half-up 반올림 (파이썬 round 는 banker's rounding)
    return min(255, max(0, int(math.floor(value / step + 0.5)) * step))


def quantize_color(r: int, g: int, b: int, step: int = 16) -> str:
    """
    색상 양자화 (통계를 위해 색상 수를 줄임)
    각 채널을 가장 가까운 step 배수로 반올림하고 255 로 제한

    Args:
        r, g, b: 0-255 채널 값
        step: 양자화 간격 (기본 16)

    Returns:
        '#rrggbb' 문자열
    """
    if step <= 0:
        raise ValueError(f"step 은 양수여야 합니다: {step}")
    return rgb_to_hex(
        quantize_channel(r, step),
        quantize_channel(g, step),
        quantize_channel(b, step),
    )


def parse_fill_color(color) -> Tuple[int, int, int, int]:
    """
    채우기 색상을 RGBA 튜플로 변환
    '#fff', '#ffffff', 'rgb(...)', 'red' 등 CSS 색상 문자열과 RGB(A) 튜플 지원
    """
    if isinstance(color, (tuple, list)):
        if len(color) not in (3, 4):
            raise ValueError(f"잘못된 색상 값입니다: {color!r}")
        rgba = tuple(int(c) for c in color)
    elif isinstance(color, str):
        try:
            rgba = ImageColor.getrgb(color.strip())
        except ValueError as e:
            raise ValueError(f"잘못된 색상 문자열입니다: {color!r}") from e
    else:
        raise ValueError(f"잘못된 색상 값입니다: {color!r}")

    if len(rgba) == 3:
        rgba = rgba + (255,)
    return rgba
