"""
Spring.log 活动报名系统主应用程序
Company outing registration
"""
import logging
import streamlit as st

from springlog.services.admin_service import is_admin_authenticated
from springlog.ui.admin_dashboard import render_admin_dashboard
from springlog.ui.context import get_synchronizer
from springlog.ui.employee_portal import render_employee_portal
from springlog.ui.gateway import render_gateway

logger = logging.getLogger(__name__)


# Streamlit 页面配置
st.set_page_config(
    page_title="Spring.log 活动报名",
    page_icon="🌱",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def initialize_session_state():
    """初始化 session state 预设值。"""
    if "role" not in st.session_state:
        st.session_state.role = "none"

    # 管理员身份失效时回到入口
    if st.session_state.role == "admin" and not is_admin_authenticated():
        st.session_state.role = "none"


def apply_custom_css():
    """套用自订 CSS 样式。"""
    st.markdown("""
        <style>
        .stApp {
            background: #F8FAFC;
        }

        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .stButton > button {
            border-radius: 12px;
            font-weight: 600;
        }

        .stButton > button[kind="primary"] {
            background: #10B981;
            color: white;
            border: none;
        }

        .gateway-hero {
            padding: 32px 0 24px 0;
        }
        .gateway-badge {
            display: inline-block;
            padding: 2px 12px;
            border-radius: 999px;
            background: #10B98120;
            color: #059669;
            font-size: 11px;
            font-weight: 800;
            letter-spacing: 0.1em;
            text-transform: uppercase;
        }
        .gateway-hero .accent {
            color: #10B981;
        }

        .ticket-card {
            max-width: 420px;
            padding: 24px;
            border-radius: 24px;
            background: white;
            border: 1px solid #E2E8F0;
            box-shadow: 0 12px 24px rgba(15, 23, 42, 0.08);
            margin-bottom: 16px;
        }
        .ticket-header {
            color: #10B981;
            font-size: 12px;
            font-weight: 800;
            text-transform: uppercase;
        }
        .ticket-name {
            font-size: 28px;
            font-weight: 900;
            margin: 8px 0 12px 0;
        }
        .ticket-row {
            color: #475569;
            font-size: 14px;
            margin-bottom: 4px;
        }
        .ticket-time {
            color: #94A3B8;
            font-size: 12px;
            margin-top: 12px;
        }
        .ticket-token {
            margin-top: 16px;
            padding-top: 16px;
            border-top: 1px dashed #CBD5E1;
            font-family: monospace;
            text-align: center;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """渲染导航列。"""
    brand_col, exit_col = st.columns([5, 1], gap="small")

    with brand_col:
        st.markdown("### 🌱 Spring.log")

    with exit_col:
        if st.session_state.role != "none":
            if st.button("⏏ 切换角色", width='stretch', key="nav_exit"):
                st.session_state.role = "none"
                st.rerun()


def render_current_page():
    """根据当前角色渲染对应内容。"""
    try:
        role = st.session_state.role

        if role == "none":
            render_gateway()
            return

        sync = get_synchronizer()

        if role == "employee":
            render_employee_portal(sync)
        elif role == "admin":
            render_admin_dashboard(sync)
        else:
            st.error(f"未知的角色：{role}")
            if st.button("返回入口"):
                st.session_state.role = "none"
                st.rerun()

    except Exception as e:
        # 错误边界
        logger.exception("Unhandled exception while rendering page")
        st.error("发生错误，请稍后再试")

        with st.expander("🔍 错误详情"):
            st.code(str(e))

        if st.button("返回入口"):
            st.session_state.role = "none"
            st.rerun()


def main():
    """主应用程序入口。"""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    initialize_session_state()
    apply_custom_css()
    render_navigation()
    render_current_page()

    st.caption("Internet Technology Dept. @ 2026")


if __name__ == "__main__":
    main()
