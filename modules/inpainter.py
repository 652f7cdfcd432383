"""
Inpainter Module
텍스트 영역을 지우고 배경을 복원(Inpainting)하는 모듈

주변 배경색 단색 채우기, 일괄 자동 채우기, 좌우 그라데이션 채우기를 지원한다.
모든 작업은 원본을 한 번 디코딩하고 작업 사본에만 칠한 뒤 PNG 로 인코딩한다.
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .background import ALPHA_THRESHOLD, DEFAULT_BG_COLOR, QUANTIZE_STEP, SAMPLE_WIDTH, detect_background_color
from .color_utils import parse_fill_color
from .image_io import PixelBuffer, Surface, drawing_surface, load_image, to_data_url
from .mask import Rect, expand_mask, to_rect

FILL_PADDING = 3
GRADIENT_SAMPLE_WIDTH = 10


@dataclass(frozen=True)
class FillSpec:
    """채우기 방식: 'auto' (영역별 추정), 'solid' (지정 색), 'gradient' (좌우 추정 색)"""
    mode: str = 'auto'
    color: Optional[str] = None

    @classmethod
    def auto(cls) -> 'FillSpec':
        return cls('auto')

    @classmethod
    def solid(cls, color: str) -> 'FillSpec':
        return cls('solid', color)

    @classmethod
    def gradient(cls) -> 'FillSpec':
        return cls('gradient')


class Inpainter:
    def __init__(
        self,
        method: str = 'simple_fill',
        padding: int = FILL_PADDING,
        sample_width: int = SAMPLE_WIDTH,
        quantize_step: int = QUANTIZE_STEP,
        alpha_threshold: int = ALPHA_THRESHOLD,
        default_color: str = DEFAULT_BG_COLOR,
        max_workers: Optional[int] = None
    ):
        if method not in METHODS:
            raise ValueError(f"지원하지 않는 인페인팅 방식입니다: {method} ({', '.join(METHODS)})")
        self.method = method
        self.padding = padding
        self.sample_width = sample_width
        self.quantize_step = quantize_step
        self.alpha_threshold = alpha_threshold
        self.default_color = default_color
        self.max_workers = max_workers

    def detect_color(self, source: PixelBuffer, region) -> str:
        return detect_background_color(
            source, region, self.sample_width, self.quantize_step, self.alpha_threshold, self.default_color
        )

    def _paint_solid(self, surface: Surface, mask: Rect, color):
        surface.fill_rect(expand_mask(mask, self.padding), parse_fill_color(color))

    def _paint_gradient(self, surface: Surface, source: PixelBuffer, mask: Rect):
        # 마스크 바로 왼쪽/오른쪽 10px 띠의 색을 각각 추정
        sw = GRADIENT_SAMPLE_WIDTH
        left_region = Rect(max(0, mask.x - sw), mask.y, sw, mask.height)
        right_region = Rect(min(source.width - sw, mask.x + mask.width), mask.y, sw, mask.height)

        left_color = self.detect_color(source, left_region)
        right_color = self.detect_color(source, right_region)

        surface.fill_horizontal_gradient(
            expand_mask(mask, self.padding),
            parse_fill_color(left_color)[:3],
            parse_fill_color(right_color)[:3]
        )

    def estimate_colors(self, source: PixelBuffer, masks: Sequence[Rect]) -> List[str]:
        """모든 마스크의 배경색을 원본에서 동시에 추정 (입력 순서대로 반환)"""
        if not masks:
            return []
        source = source.read_only()
        workers = min(len(masks), self.max_workers) if self.max_workers else None
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda m: self.detect_color(source, m), masks))

    # ------------------------------------------------------------------
    # 인코딩된 이미지 -> 인코딩된 이미지
    # ------------------------------------------------------------------

    def fill_with_color(self, image, masks: Sequence, fill_color: Optional[str] = None) -> str:
        """
        지정 영역들을 배경색으로 채워 텍스트 제거

        fill_color 가 없으면 마스크마다 원본에서 배경색을 감지한다.
        마스크는 입력 순서대로 칠해지고 겹치면 나중 것이 남는다.

        Returns:
            'data:image/png;base64,...'
        """
        source = load_image(image)
        rects = [to_rect(m) for m in masks]

        with drawing_surface(source) as surface:
            for mask in rects:
                color = fill_color or self.detect_color(source, mask)
                self._paint_solid(surface, mask, color)
            return to_data_url(surface.buffer)

    def fill_auto(self, image, masks: Sequence) -> str:
        """
        일괄 처리: 모든 마스크의 배경색을 원본에서 먼저 감지한 뒤 순서대로 채운다.
        앞서 칠한 영역이 뒤 마스크의 색상 추정에 영향을 주지 않는다.
        """
        source = load_image(image)
        rects = [to_rect(m) for m in masks]
        colors = self.estimate_colors(source, rects)

        with drawing_surface(source) as surface:
            for mask, color in zip(rects, colors):
                self._paint_solid(surface, mask, color)
            return to_data_url(surface.buffer)

    def fill_gradient(self, image, mask) -> str:
        """좌우 배경색 사이의 수평 그라데이션으로 단일 영역 채우기"""
        source = load_image(image)
        with drawing_surface(source) as surface:
            self._paint_gradient(surface, source, to_rect(mask))
            return to_data_url(surface.buffer)

    def inpaint(self, image, masks: Sequence, spec: Optional[FillSpec] = None) -> str:
        """FillSpec 에 따라 채우기 방식 선택 (기본값은 생성 시 지정한 method)"""
        spec = spec or self.default_spec()
        if spec.mode == 'auto':
            return self.fill_auto(image, masks)
        if spec.mode == 'solid':
            if not spec.color:
                raise ValueError("solid 채우기에는 색상이 필요합니다")
            return self.fill_with_color(image, masks, spec.color)
        if spec.mode == 'gradient':
            source = load_image(image)
            with drawing_surface(source) as surface:
                for mask in masks:
                    self._paint_gradient(surface, source, to_rect(mask))
                return to_data_url(surface.buffer)
        raise ValueError(f"알 수 없는 채우기 방식입니다: {spec.mode}")

    def default_spec(self) -> FillSpec:
        return FillSpec.gradient() if self.method == 'gradient' else FillSpec.auto()

    # ------------------------------------------------------------------
    # 픽셀 버퍼 -> 픽셀 버퍼 (인코딩 없이 다른 래스터 단계와 연결할 때)
    # ------------------------------------------------------------------

    def remove_all_text_regions(self, buffer: PixelBuffer, regions: Sequence) -> PixelBuffer:
        """지정된 모든 텍스트 영역을 지운 새 버퍼 반환 (원본 유지)"""
        rects = [to_rect(r) for r in regions]
        with drawing_surface(buffer) as surface:
            if self.method == 'gradient':
                for mask in rects:
                    self._paint_gradient(surface, buffer, mask)
            else:
                for mask, color in zip(rects, self.estimate_colors(buffer, rects)):
                    self._paint_solid(surface, mask, color)
            return surface.buffer


METHODS = ('simple_fill', 'gradient')


def create_inpainter(method: Optional[str] = None, **overrides) -> Inpainter:
    """설정(INPAINT_CONFIG) 기본값으로 Inpainter 생성"""
    from config.settings import INPAINT_CONFIG

    return Inpainter(
        method=method or INPAINT_CONFIG['method'],
        padding=overrides.get('padding', INPAINT_CONFIG['fill_padding']),
        sample_width=overrides.get('sample_width', INPAINT_CONFIG['sample_width']),
        quantize_step=overrides.get('quantize_step', INPAINT_CONFIG['quantize_step']),
        alpha_threshold=overrides.get('alpha_threshold', INPAINT_CONFIG['alpha_threshold']),
        default_color=overrides.get('default_color', INPAINT_CONFIG['default_color']),
        max_workers=overrides.get('max_workers', INPAINT_CONFIG['max_workers']),
    )


# 모듈 수준 편의 함수
def fill_with_color(image, masks: Sequence, fill_color: Optional[str] = None) -> str:
    return Inpainter().fill_with_color(image, masks, fill_color)


def fill_auto(image, masks: Sequence) -> str:
    return Inpainter().fill_auto(image, masks)


def fill_gradient(image, mask) -> str:
    return Inpainter().fill_gradient(image, mask)
