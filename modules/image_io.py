"""
Image IO Module
인코딩된 이미지(data URI / base64 / bytes) <-> RGBA 픽셀 버퍼 변환과
호출 단위로 확보/해제되는 드로잉 표면
"""
import base64
import binascii
import re
from contextlib import contextmanager
from dataclasses import dataclass
from io import BytesIO
from typing import Iterator, Tuple, Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, RenderError
from .mask import Rect

DATA_URI_RE = re.compile(r'^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*),(?P<payload>.*)$', re.DOTALL)
PNG_DATA_URI_PREFIX = 'data:image/png;base64,'

EncodedImage = Union[bytes, bytearray, str]


@dataclass
class PixelBuffer:
    """
    RGBA 픽셀 버퍼 (shape: height x width x 4, uint8)

    한 번의 호출 안에서만 사용된다: 디코딩 1회 -> 작업 사본 수정 -> 인코딩 1회
    """
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"RGBA 배열이 필요합니다: shape={self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            self.pixels = self.pixels.astype(np.uint8)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(np.ascontiguousarray(self.pixels.copy()))

    def read_only(self) -> 'PixelBuffer':
        """쓰기 불가능한 뷰 (색상 추정용 원본)"""
        view = self.pixels.view()
        view.setflags(write=False)
        return PixelBuffer(view)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    @classmethod
    def from_pil(cls, image: Image.Image) -> 'PixelBuffer':
        # 16비트 그레이스케일(I;16 등)은 convert 가 0/255 로 잘라내므로 8비트로 축소
        if image.mode.startswith('I'):
            values = np.asarray(image).astype(np.uint32) >> 8
            image = Image.fromarray(np.minimum(values, 255).astype(np.uint8))
        return cls(np.array(image.convert('RGBA'), dtype=np.uint8))

    def to_bgr(self) -> np.ndarray:
        return cv2.cvtColor(np.ascontiguousarray(self.pixels), cv2.COLOR_RGBA2BGR)


def _decode_base64(payload: str) -> bytes:
    payload = ''.join(payload.split())
    if not payload:
        raise DecodeError("빈 이미지 데이터입니다")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"base64 디코딩 실패: {e}") from e


def _to_raw_bytes(encoded: EncodedImage) -> bytes:
    """data URI / base64 문자열 / 원본 바이트를 이미지 바이트로 변환"""
    if isinstance(encoded, (bytes, bytearray)):
        raw = bytes(encoded)
        if not raw.startswith(b'data:'):
            return raw
        try:
            encoded = raw.decode('ascii')
        except UnicodeDecodeError as e:
            raise DecodeError("data URI 에 ASCII 가 아닌 문자가 포함되어 있습니다") from e

    if not isinstance(encoded, str):
        raise DecodeError(f"지원하지 않는 이미지 입력 형식입니다: {type(encoded).__name__}")

    encoded = encoded.strip()
    if encoded.startswith('data:'):
        match = DATA_URI_RE.match(encoded)
        if not match:
            raise DecodeError("잘못된 data URI 형식입니다")
        if ';base64' not in match.group('params'):
            raise DecodeError("base64 로 인코딩된 data URI 만 지원합니다")
        return _decode_base64(match.group('payload'))

    # 접두어가 없으면 image/png base64 로 간주
    return _decode_base64(encoded)


def load_image(encoded) -> PixelBuffer:
    """
    인코딩된 이미지를 RGBA 픽셀 버퍼로 로드

    Args:
        encoded: 원본 이미지 바이트, base64 문자열
                 ('data:image/...;base64,' 접두어 유무 무관),
                 PixelBuffer 또는 PIL 이미지

    Returns:
        새로 할당된 PixelBuffer

    Raises:
        DecodeError: 이미지로 해석할 수 없는 경우
    """
    if isinstance(encoded, PixelBuffer):
        return encoded.copy()
    if isinstance(encoded, Image.Image):
        return PixelBuffer.from_pil(encoded)

    raw = _to_raw_bytes(encoded)
    if not raw:
        raise DecodeError("빈 이미지 데이터입니다")

    try:
        with Image.open(BytesIO(raw)) as img:
            img.load()
            return PixelBuffer.from_pil(img)
    except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise DecodeError(f"이미지 디코딩 실패: {e}") from e


def encode_png(buffer: PixelBuffer) -> bytes:
    """픽셀 버퍼를 PNG 바이트로 인코딩"""
    try:
        out = BytesIO()
        buffer.to_pil().save(out, format='PNG')
    except (OSError, ValueError) as e:
        raise RenderError(f"PNG 인코딩 실패: {e}") from e
    return out.getvalue()


def to_data_url(buffer: PixelBuffer) -> str:
    """픽셀 버퍼를 'data:image/png;base64,...' 문자열로 변환"""
    return PNG_DATA_URI_PREFIX + base64.b64encode(encode_png(buffer)).decode('ascii')


class Surface:
    """작업용 픽셀 버퍼 위에 사각형을 칠하는 드로잉 표면"""

    def __init__(self, buffer: PixelBuffer):
        self.buffer = buffer
        self.closed = False

    def _pixels(self) -> np.ndarray:
        if self.closed:
            raise RenderError("이미 해제된 드로잉 표면입니다")
        return self.buffer.pixels

    def fill_rect(self, rect: Rect, rgba: Tuple[int, int, int, int]):
        """단색 사각형 채우기 (source-over 합성)"""
        pixels = self._pixels()
        clipped = rect.clip(self.buffer.width, self.buffer.height)
        if clipped is None:
            return
        x1, y1, x2, y2 = clipped
        alpha = rgba[3]

        if alpha >= 255:
            try:
                # cv2 는 끝점을 포함하므로 -1
                cv2.rectangle(pixels, (x1, y1), (x2 - 1, y2 - 1), tuple(int(c) for c in rgba), -1)
            except cv2.error as e:
                raise RenderError(f"사각형 채우기 실패: {e}") from e
            return
        if alpha <= 0:
            return

        # 비사전곱(non-premultiplied) source-over
        a_s = alpha / 255.0
        roi = pixels[y1:y2, x1:x2].astype(np.float64)
        a_d = roi[..., 3:] / 255.0
        src = np.array(rgba[:3], dtype=np.float64)

        out_a = a_s + a_d * (1 - a_s)
        out_rgb = (src * a_s + roi[..., :3] * a_d * (1 - a_s)) / np.where(out_a > 0, out_a, 1.0)
        roi[..., :3] = out_rgb
        roi[..., 3:] = out_a * 255
        pixels[y1:y2, x1:x2] = np.clip(np.floor(roi + 0.5), 0, 255).astype(np.uint8)

    def fill_horizontal_gradient(
        self,
        rect: Rect,
        left_rgb: Tuple[int, int, int],
        right_rgb: Tuple[int, int, int]
    ):
        """
        왼쪽 색 -> 오른쪽 색 수평 선형 그라데이션으로 사각형 채우기
        그라데이션 축은 잘리기 전 rect 의 x ~ x + width
        """
        pixels = self._pixels()
        clipped = rect.clip(self.buffer.width, self.buffer.height)
        if clipped is None:
            return
        x1, y1, x2, y2 = clipped

        x0, span = rect.x, rect.width
        cols = np.arange(x1, x2, dtype=np.float64) + 0.5
        t = np.clip((cols - x0) / span, 0.0, 1.0)[:, None]
        left = np.array(left_rgb, dtype=np.float64)
        right = np.array(right_rgb, dtype=np.float64)
        colors = np.floor(left + (right - left) * t + 0.5).astype(np.uint8)

        pixels[y1:y2, x1:x2, :3] = colors[None, :, :]
        pixels[y1:y2, x1:x2, 3] = 255


@contextmanager
def drawing_surface(source: PixelBuffer) -> Iterator[Surface]:
    """
    원본을 복사한 작업용 드로잉 표면을 확보하고, 블록을 벗어나면 해제

    원본 버퍼는 수정되지 않는다.
    """
    try:
        working = source.copy()
    except (MemoryError, ValueError) as e:
        raise RenderError(f"드로잉 표면을 확보할 수 없습니다: {e}") from e

    surface = Surface(working)
    try:
        yield surface
    finally:
        surface.closed = True
