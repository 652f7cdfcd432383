"""
Mask Module
마스크/영역 사각형 정의와 확장, 이미지 경계 클리핑
"""
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Rect:
    """픽셀 좌표 사각형 (지울 마스크 또는 색상 샘플 영역)"""
    x: int
    y: int
    width: int
    height: int

    def clip(self, img_w: int, img_h: int) -> Optional[Tuple[int, int, int, int]]:
        """
        이미지 경계 [0, w) x [0, h) 로 잘라낸 (x1, y1, x2, y2) 반환
        겹치는 픽셀이 없으면 None
        """
        x1 = max(0, self.x)
        y1 = max(0, self.y)
        x2 = min(img_w, self.x + self.width)
        y2 = min(img_h, self.y + self.height)
        if x2 <= x1 or y2 <= y1:
            return None
        return x1, y1, x2, y2


# 지울 영역과 샘플 영역은 같은 형태
Mask = Rect
Region = Rect


def to_rect(region) -> Rect:
    """
    다양한 형태의 영역 입력을 Rect 로 변환
    - Rect
    - {'x', 'y', 'width', 'height'} 딕셔너리
    - {'bounds': {...}} 딕셔너리 또는 bounds 속성을 가진 객체 (TextRegion 등)
    - (x, y, w, h) 시퀀스
    """
    if isinstance(region, Rect):
        return region

    # 객체 또는 딕셔너리 호환 처리
    if isinstance(region, dict):
        bounds = region.get('bounds', region)
    elif hasattr(region, 'bounds'):
        bounds = region.bounds
    else:
        bounds = region

    try:
        if isinstance(bounds, dict):
            return Rect(
                x=int(bounds['x']),
                y=int(bounds['y']),
                width=int(bounds['width']),
                height=int(bounds['height']),
            )
        x, y, w, h = bounds
        return Rect(int(x), int(y), int(w), int(h))
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"영역 형식이 올바르지 않습니다: {region!r}") from e


def expand_mask(mask, padding: int = 5) -> Rect:
    """
    마스크 범위 확장 (글자 가장자리까지 완전히 덮기 위함)

    좌상단은 0 으로 클램프하지만 너비/높이는 항상 2 * padding 만큼 늘린다.
    이미지 가장자리에 붙은 영역은 오른쪽/아래로 조금 더 넓게 덮인다.

    Args:
        mask: 원본 마스크
        padding: 사방으로 확장할 픽셀 수 (기본 5)

    Returns:
        확장된 Rect
    """
    m = to_rect(mask)
    return Rect(
        x=max(0, m.x - padding),
        y=max(0, m.y - padding),
        width=m.width + padding * 2,
        height=m.height + padding * 2,
    )
