"""Gateway UI: choose between employee sign-up and the admin dashboard."""
import streamlit as st

from springlog.services.admin_service import login_admin
from springlog.ui.html_utils import html_block

ADMIN_MODE_KEY = "gateway_admin_mode"


def _render_hero() -> None:
    st.markdown(
        html_block(
            """
            <div class="gateway-hero">
                <div class="gateway-badge">Spring.log 2026</div>
                <h1>重启 <span class="accent">线下</span> 物理连接</h1>
                <p>告别屏幕像素，步入现代园林。在竹林与水景之间，重构我们的团队逻辑分支。</p>
            </div>
            """
        ),
        unsafe_allow_html=True,
    )


def _render_admin_login() -> None:
    with st.form("gateway_admin_form", clear_on_submit=False):
        st.markdown("#### 🔐 管理员通道")
        password = st.text_input("授权码", type="password", placeholder="请输入授权码")

        submit_col, cancel_col = st.columns(2, gap="small")
        with submit_col:
            submit = st.form_submit_button("进入后台", width='stretch', type="primary")
        with cancel_col:
            cancel = st.form_submit_button("返回", width='stretch')

    if submit:
        success, message = login_admin(password)
        if success:
            st.session_state[ADMIN_MODE_KEY] = False
            st.session_state.role = "admin"
            st.rerun()
        else:
            st.error(f"❌ {message}")

    if cancel:
        st.session_state[ADMIN_MODE_KEY] = False
        st.rerun()


def render_gateway() -> None:
    """Render the role selector."""
    _render_hero()

    if st.session_state.get(ADMIN_MODE_KEY):
        _render_admin_login()
        return

    employee_col, admin_col = st.columns(2, gap="medium")
    with employee_col:
        if st.button("🙋 我是员工：报名 / 查看门票", width='stretch', type="primary", key="gateway_employee"):
            st.session_state.role = "employee"
            st.rerun()
    with admin_col:
        if st.button("🛡️ 管理员入口", width='stretch', key="gateway_admin"):
            st.session_state[ADMIN_MODE_KEY] = True
            st.rerun()
