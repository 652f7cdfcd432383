import streamlit as st
import cv2
from PIL import Image
import io
import uuid
import base64
import logging
from datetime import datetime

# [필수] 캔버스 라이브러리
from streamlit_drawable_canvas import st_canvas

from config.settings import INPAINT_CONFIG, UI_CONFIG, load_env, setup_logging

# Modules
from modules import (
    DecodeError,
    FillSpec,
    InpaintError,
    Rect,
    create_inpainter,
    load_image,
)

logger = logging.getLogger(__name__)

# 페이지 설정
st.set_page_config(layout="wide", page_title="인포그래픽 텍스트 지우개")

def init_session_state():
    if 'current_step' not in st.session_state:
        st.session_state.current_step = 1
    if 'source_image' not in st.session_state:
        st.session_state.source_image = None
    if 'masks' not in st.session_state:
        st.session_state.masks = []
    if 'result_image' not in st.session_state:
        st.session_state.result_image = None
    if 'canvas_key' not in st.session_state:
        st.session_state.canvas_key = "canvas_v1"

def data_url_to_rgb(data_url: str) -> Image.Image:
    return load_image(data_url).to_pil().convert("RGB")

def draw_masks_on_image(buffer, masks):
    vis_image = buffer.to_bgr()
    for m in masks:
        cv2.rectangle(vis_image, (m.x, m.y), (m.x + m.width, m.y + m.height), (0, 0, 255), 2)
    return vis_image

def render_step1_upload():
    st.header("1. 이미지 업로드")
    uploaded_file = st.file_uploader("텍스트를 지울 이미지를 업로드하세요", type=['png', 'jpg', 'jpeg', 'webp'])
    if uploaded_file is not None:
        image_bytes = uploaded_file.read()
        try:
            buffer = load_image(image_bytes)
        except DecodeError as e:
            logger.warning("업로드 이미지 디코딩 실패: %s", e)
            st.error(f"이미지를 읽을 수 없습니다: {e}")
            return
        # 이후 단계는 data URI 형태로 엔진에 전달
        st.session_state.source_image = f"data:{uploaded_file.type or 'image/png'};base64," + base64.b64encode(image_bytes).decode()
        st.session_state.uploaded_filename = uploaded_file.name
        st.session_state.masks = []
        st.session_state.result_image = None
        st.image(buffer.to_pil(), caption=f"원본 이미지 ({buffer.width}x{buffer.height})", use_container_width=True)
        if st.button("다음 단계로 이동", type="primary"):
            st.session_state.current_step = 2
            st.rerun()

def render_step2_masks():
    st.header("Step 2: 지울 텍스트 영역 지정")
    if st.session_state.source_image is None:
        st.warning("이미지를 먼저 업로드해주세요."); return

    buffer = load_image(st.session_state.source_image)
    w_orig, h_orig = buffer.size
    canvas_width = UI_CONFIG["canvas_width"]
    scale_factor = w_orig / canvas_width if w_orig > canvas_width else 1.0

    disp_w = int(w_orig / scale_factor)
    disp_h = int(h_orig / scale_factor)
    display_img = buffer.to_pil().convert("RGB").resize((disp_w, disp_h), Image.LANCZOS)

    with io.BytesIO() as out:
        display_img.save(out, format="JPEG", quality=85)
        bg_image_url = f"data:image/jpeg;base64,{base64.b64encode(out.getvalue()).decode()}"

    col_btn, _ = st.columns([1, 4])
    with col_btn:
        if st.button("🔄 캔버스 리셋"):
            st.session_state.canvas_key = f"canvas_{uuid.uuid4()}"
            st.rerun()

    canvas_result = st_canvas(
        fill_color=UI_CONFIG["canvas_fill_color"],
        stroke_width=UI_CONFIG["canvas_stroke_width"],
        stroke_color=UI_CONFIG["canvas_stroke_color"],
        background_image=bg_image_url,
        update_streamlit=True,
        height=disp_h,
        width=disp_w,
        drawing_mode="rect",
        key=st.session_state.canvas_key,
        display_toolbar=True
    )

    if canvas_result.json_data is None:
        return
    objects = canvas_result.json_data["objects"]
    if not objects:
        return

    st.success(f"✅ 선택된 영역: {len(objects)}개")
    if st.button("🧽 지우기 설정 (Step 3)", type="primary"):
        masks = []
        for obj in objects:
            x = max(0, int(obj["left"] * scale_factor))
            y = max(0, int(obj["top"] * scale_factor))
            w = int(obj["width"] * obj.get("scaleX", 1) * scale_factor)
            h = int(obj["height"] * obj.get("scaleY", 1) * scale_factor)
            if w < 2 or h < 2: continue
            masks.append(Rect(x, y, w, h))
        st.session_state.masks = masks
        st.session_state.result_image = None
        st.session_state.current_step = 3
        st.rerun()

def render_step3_fill():
    st.header("🧽 Step 3: 배경 채우기")
    masks = st.session_state.masks
    if not masks: st.warning("지정된 영역이 없습니다"); return

    modes = UI_CONFIG["fill_modes"]
    default_mode = "gradient" if INPAINT_CONFIG["method"] == "gradient" else "auto"
    mode = st.radio("채우기 방식", list(modes), index=list(modes).index(default_mode), format_func=modes.get, horizontal=True)
    spec = FillSpec(mode)
    if mode == "solid":
        spec = FillSpec.solid(st.color_picker("채우기 색상", value=INPAINT_CONFIG["default_color"]))

    if st.button("적용", type="primary"):
        try:
            inpainter = create_inpainter()
            with st.spinner("처리 중..."):
                st.session_state.result_image = inpainter.inpaint(st.session_state.source_image, masks, spec)
            logger.info("%d개 영역 처리 완료 (mode=%s)", len(masks), mode)
        except InpaintError as e:
            logger.exception("인페인팅 실패")
            st.error(f"오류: {e}")

    source = load_image(st.session_state.source_image)
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("원본")
        st.image(cv2.cvtColor(draw_masks_on_image(source, masks), cv2.COLOR_BGR2RGB), use_container_width=True)
    with col2:
        st.subheader("결과")
        if st.session_state.result_image:
            st.image(data_url_to_rgb(st.session_state.result_image), use_container_width=True)
            png_bytes = base64.b64decode(st.session_state.result_image.split(",", 1)[1])
            st.download_button("다운로드", data=png_bytes, file_name=f"erased_{datetime.now().strftime('%H%M%S')}.png", mime="image/png")

    st.divider()
    c1, c2 = st.columns(2)
    with c1:
        if st.button("⬅️ 재지정"): st.session_state.current_step = 2; st.rerun()
    with c2:
        if st.button("처음으로"): st.session_state.current_step = 1; st.rerun()

def main():
    load_env()
    setup_logging()
    init_session_state()
    step = st.session_state.current_step
    if step == 1: render_step1_upload()
    elif step == 2: render_step2_masks()
    elif step == 3: render_step3_fill()

if __name__ == "__main__":
    main()
