"""
Background Module
영역 주변 테두리를 샘플링해 배경색을 추정
"""
from typing import List

import numpy as np

from .color_utils import rgb_to_hex
from .image_io import PixelBuffer, load_image
from .mask import Rect, to_rect

DEFAULT_BG_COLOR = '#ffffff'
SAMPLE_WIDTH = 10
QUANTIZE_STEP = 16
ALPHA_THRESHOLD = 128


def border_sample_regions(region: Rect, img_w: int, img_h: int, sample_width: int = SAMPLE_WIDTH) -> List[Rect]:
    """
    영역을 둘러싼 테두리 샘플 영역 (상, 하, 좌, 우)
    상/하 띠는 좌우로 sample_width 만큼 더 길어서 모서리를 덮는다.
    """
    sw = sample_width
    return [
        # 상단
        Rect(max(0, region.x - sw), max(0, region.y - sw), region.width + sw * 2, sw),
        # 하단
        Rect(max(0, region.x - sw), min(img_h - sw, region.y + region.height), region.width + sw * 2, sw),
        # 좌측
        Rect(max(0, region.x - sw), region.y, sw, region.height),
        # 우측
        Rect(min(img_w - sw, region.x + region.width), region.y, sw, region.height),
    ]


def collect_samples(buffer: PixelBuffer, regions: List[Rect]) -> np.ndarray:
    """
    샘플 영역의 픽셀을 방문 순서대로 (영역 순, 행 우선) 모은다.
    이미지 밖 좌표는 건너뛴다. 반환 shape: (N, 4)
    """
    chunks = []
    for r in regions:
        clipped = r.clip(buffer.width, buffer.height)
        if clipped is None:
            continue
        x1, y1, x2, y2 = clipped
        chunks.append(buffer.pixels[y1:y2, x1:x2].reshape(-1, 4))
    if not chunks:
        return np.empty((0, 4), dtype=np.uint8)
    return np.concatenate(chunks)


def dominant_color(
    samples: np.ndarray,
    step: int = QUANTIZE_STEP,
    alpha_threshold: int = ALPHA_THRESHOLD,
    default_color: str = DEFAULT_BG_COLOR
) -> str:
    """
    가장 많이 등장한 양자화 색상
    동률이면 먼저 등장한 색상이 이긴다. 샘플이 없으면 default_color (기본 흰색).
    """
    if step <= 0:
        raise ValueError(f"step 은 양수여야 합니다: {step}")

    # 투명 픽셀 무시
    opaque = samples[samples[:, 3] >= alpha_threshold]
    if len(opaque) == 0:
        return default_color

    quantized = np.floor(opaque[:, :3].astype(np.float64) / step + 0.5).astype(np.int64) * step
    quantized = np.minimum(quantized, 255)
    keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]

    # 등장 순서(첫 인덱스)로 동률 처리
    uniq, first_idx, counts = np.unique(keys, return_index=True, return_counts=True)
    best = counts.max()
    candidates = np.flatnonzero(counts == best)
    winner = uniq[candidates[np.argmin(first_idx[candidates])]]

    return rgb_to_hex((winner >> 16) & 0xff, (winner >> 8) & 0xff, winner & 0xff)


def detect_background_color(
    image,
    region,
    sample_width: int = SAMPLE_WIDTH,
    step: int = QUANTIZE_STEP,
    alpha_threshold: int = ALPHA_THRESHOLD,
    default_color: str = DEFAULT_BG_COLOR
) -> str:
    """
    영역 주변의 배경색 감지

    전략:
    1. 영역 주변 테두리(sample_width 픽셀)의 픽셀을 샘플링
    2. 양자화한 색상의 빈도를 집계 (알파 128 미만 제외)
    3. 가장 많이 등장한 색상을 채우기 색으로 반환

    Args:
        image: PixelBuffer 또는 load_image 가 받는 인코딩된 이미지
        region: 대상 영역
        sample_width: 테두리 샘플 두께
        step: 양자화 간격
        alpha_threshold: 이 값 미만의 알파는 통계에서 제외
        default_color: 샘플이 없을 때 반환할 색상

    Returns:
        HEX 색상 (예: '#ffffff'). 샘플이 없으면 default_color
    """
    buffer = image if isinstance(image, PixelBuffer) else load_image(image)
    rect = to_rect(region)
    regions = border_sample_regions(rect, buffer.width, buffer.height, sample_width)
    return dominant_color(collect_samples(buffer, regions), step, alpha_threshold, default_color)
