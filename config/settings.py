"""
Infographic Text Eraser - Configuration Settings
"""
import logging
import os

# ============================================
# 인페인팅 설정
# ============================================
INPAINT_CONFIG = {
    "method": "simple_fill",  # simple_fill, gradient
    "fill_padding": 3,        # 채우기 전에 마스크를 확장하는 폭
    "sample_width": 10,       # 배경색 샘플 테두리 두께
    "quantize_step": 16,
    "alpha_threshold": 128,   # 이 값 미만의 알파는 투명으로 보고 통계에서 제외
    "default_color": "#ffffff",   # 샘플이 없을 때 추정 색상, 지정 색상 기본값
    "max_workers": 4,         # fill_auto 색상 추정 스레드 수
}

# ============================================
# UI 설정
# ============================================
UI_CONFIG = {
    "canvas_stroke_width": 2,
    "canvas_stroke_color": "#FF0000",
    "canvas_fill_color": "rgba(255, 0, 0, 0.15)",
    "canvas_width": 700,
    "fill_modes": {
        "auto": "자동 (영역별 배경색)",
        "solid": "지정 색상",
        "gradient": "그라데이션 (좌우 배경색)",
    },
}

# ============================================
# 로깅 설정
# ============================================
LOG_CONFIG = {
    "level_env_var": "LOG_LEVEL",
    "default_level": "INFO",
    "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
}


# ============================================
# 환경 변수 로드
# ============================================
def load_env():
    """환경 변수 로드 (.env 지원) 및 설정 덮어쓰기"""
    from dotenv import load_dotenv
    load_dotenv()

    method = os.getenv("INPAINT_METHOD")
    if method:
        INPAINT_CONFIG["method"] = method

    max_workers = os.getenv("INPAINT_MAX_WORKERS")
    if max_workers:
        try:
            INPAINT_CONFIG["max_workers"] = max(1, int(max_workers))
        except ValueError:
            raise ValueError(f"INPAINT_MAX_WORKERS 는 정수여야 합니다: {max_workers!r}")


def setup_logging():
    """루트 로거 설정"""
    level = os.getenv(LOG_CONFIG["level_env_var"], LOG_CONFIG["default_level"]).upper()
    logging.basicConfig(level=level, format=LOG_CONFIG["format"])
