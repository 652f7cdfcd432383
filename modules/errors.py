"""
Errors Module
인페인팅 처리 중 발생하는 예외 정의
"""


class InpaintError(Exception):
    """인페인팅 엔진의 기본 예외"""


class DecodeError(InpaintError):
    """입력 데이터를 이미지로 해석할 수 없음"""


class RenderError(InpaintError):
    """드로잉 표면을 확보하거나 그릴 수 없음"""
