"""
Infographic Text Eraser Modules Package
"""

# 예외
from .errors import InpaintError, DecodeError, RenderError

# 이미지 입출력
from .image_io import (
    PixelBuffer,
    load_image,
    encode_png,
    to_data_url,
    drawing_surface,
)

# 색상 및 영역
from .color_utils import quantize_color, rgb_to_hex, hex_to_rgb, parse_fill_color
from .mask import Rect, Mask, Region, expand_mask, to_rect
from .background import detect_background_color

# 이미지 복원 (인페인팅) 관련
from .inpainter import (
    FillSpec,
    Inpainter,
    create_inpainter,
    fill_with_color,
    fill_auto,
    fill_gradient,
)
