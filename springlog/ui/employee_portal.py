"""Employee portal: event intro, registration form and ticket view."""
import logging
from typing import Optional

import streamlit as st

from springlog.models.registration import (
    DIETARY_CATEGORIES,
    DIETARY_NEEDS_NOTE,
    CommutePreference,
    Registration,
    RegistrationForm,
    encode_dietary,
    split_dietary,
)
from springlog.services.registration_service import RegistrationSynchronizer
from springlog.ui.html_utils import html_block, safe
from springlog.utils.exceptions import RegistrationError

logger = logging.getLogger(__name__)

EDIT_MODE_KEY = "portal_edit_mode"
SHOW_FORM_KEY = "portal_show_form"
FEEDBACK_KEY = "portal_feedback"

INTRO = (
    "改 Bug 改累了吗？内存溢出了吗？是时候强制关闭 IDE，断开物理连接，将身体推送到大自然的分支。"
    "加入我们，体验零延迟、高带宽的户外社交，完成一次真实的 P2P 交流。"
)

TIPS = [
    ("硬核环境配置", "出发前请执行 `npm install sunscreen`。紫外线是最大的内存泄漏源，请务必做好物理隔离。"),
    ("原子化提交", "确保生产环境的分支已合并且稳定。山里没有信号，拒绝任何形式的户外 Hotfix！"),
    ("冗余电源备份", "充电宝是你的物理 RAID 1。不要让你的身体含水量跌至 0%，随时保持补给。"),
]

SUCCESS_FEEDBACK = "Submission 200 OK。你的报名信息已成功推送到活动主分支。我们野外见！"

DIETARY_LABELS = {
    "None": "无",
    "Vegetarian": "素食",
    "Halal": "清真",
    "Allergy": "过敏",
    "Other": "其他",
}


def build_registration_form(
    name: str,
    employee_identifier: str,
    contact_info: str,
    dietary_category: str,
    dietary_note: str,
    activity_interest: str,
    commute_preference: CommutePreference,
) -> RegistrationForm:
    """Assemble a RegistrationForm from raw widget values."""
    return RegistrationForm(
        name=(name or "").strip(),
        employee_identifier=(employee_identifier or "").strip(),
        contact_info=(contact_info or "").strip(),
        dietary_preference=encode_dietary(dietary_category, dietary_note),
        activity_interest=(activity_interest or "").strip(),
        commute_preference=commute_preference,
    )


def _render_ticket_card(registration: Registration) -> str:
    """Build the ticket card HTML for a registration."""
    category, note = split_dietary(registration.dietary_preference)
    dietary = DIETARY_LABELS.get(category, category)
    if note:
        dietary = f"{dietary}（{note}）"

    return html_block(
        f"""
        <div class="ticket-card">
            <div class="ticket-header">Spring.log 2026 · 入场凭证</div>
            <div class="ticket-name">{safe(registration.name)}</div>
            <div class="ticket-row">工号：{safe(registration.employee_identifier)}</div>
            <div class="ticket-row">联系方式：{safe(registration.contact_info)}</div>
            <div class="ticket-row">饮食：{safe(dietary)}</div>
            <div class="ticket-row">出行：{safe(registration.commute_preference.label)}</div>
            <div class="ticket-row">活动兴趣：{safe(registration.activity_interest or "—")}</div>
            <div class="ticket-time">更新于 {safe(registration.submitted_at)}</div>
            <div class="ticket-token">Ticket Token<br><strong>{safe(registration.ticket_token)}</strong></div>
        </div>
        """
    )


def _show_feedback() -> None:
    feedback = st.session_state.pop(FEEDBACK_KEY, None)
    if not feedback:
        return
    level, message = feedback
    if level == "success":
        st.success(message)
    elif level == "warning":
        st.warning(message)
    else:
        st.error(message)


def _render_form(sync: RegistrationSynchronizer, existing: Optional[Registration]) -> None:
    """Render the create/edit form and submit through the synchronizer."""
    defaults = existing.to_form() if existing else None
    category, note = split_dietary(defaults.dietary_preference) if defaults else ("None", "")
    commute_options = list(CommutePreference)

    with st.form("registration_form", clear_on_submit=False):
        st.markdown("### ✏️ 修改报名信息" if existing else "### 📝 填写报名信息")

        name = st.text_input("姓名", value=defaults.name if defaults else "", max_chars=50)
        employee_identifier = st.text_input(
            "工号",
            value=defaults.employee_identifier if defaults else "",
            help="工号用于识别你的报名，重复提交会覆盖原有信息",
        )
        contact_info = st.text_input("联系方式", value=defaults.contact_info if defaults else "")

        dietary_category = st.selectbox(
            "饮食禁忌",
            options=DIETARY_CATEGORIES,
            index=DIETARY_CATEGORIES.index(category) if category in DIETARY_CATEGORIES else 0,
            format_func=lambda c: DIETARY_LABELS[c],
        )
        dietary_note = st.text_input("饮食补充说明（过敏 / 其他时必填）", value=note)
        activity_interest = st.text_input(
            "活动兴趣（可选）", value=defaults.activity_interest if defaults else ""
        )
        commute = st.radio(
            "拼车意向",
            options=commute_options,
            index=commute_options.index(defaults.commute_preference) if defaults else 2,
            format_func=lambda c: c.label,
            horizontal=True,
        )

        submit_col, cancel_col = st.columns(2, gap="small")
        with submit_col:
            submit = st.form_submit_button("🚀 提交", width='stretch', type="primary")
        with cancel_col:
            cancel = st.form_submit_button("取消", width='stretch')

    if cancel:
        st.session_state[EDIT_MODE_KEY] = False
        st.session_state[SHOW_FORM_KEY] = False
        st.rerun()

    if not submit:
        return

    form = build_registration_form(
        name,
        employee_identifier,
        contact_info,
        dietary_category,
        dietary_note if dietary_category in DIETARY_NEEDS_NOTE else "",
        activity_interest,
        commute,
    )
    is_valid, error_msg = form.validate()
    if not is_valid:
        st.error(f"❌ {error_msg}")
        return

    try:
        with st.spinner("正在提交..."):
            remote_ok, message, _ = sync.submit(form)
    except RegistrationError as e:
        logger.error(f"Registration submit rejected: {e}")
        st.error(f"❌ {e}")
        return

    if remote_ok:
        st.session_state[FEEDBACK_KEY] = ("success", SUCCESS_FEEDBACK)
    else:
        st.session_state[FEEDBACK_KEY] = ("warning", f"⚠️ {message}")
    st.session_state[EDIT_MODE_KEY] = False
    st.session_state[SHOW_FORM_KEY] = False
    st.rerun()


def _render_intro() -> None:
    st.markdown("## 🌱 Spring.log: 重构生活")
    st.write(INTRO)
    tip_cols = st.columns(len(TIPS), gap="small")
    for col, (title, content) in zip(tip_cols, TIPS):
        with col:
            st.markdown(f"**{title}**")
            st.caption(content)


def render_employee_portal(sync: RegistrationSynchronizer) -> None:
    """Render the portal for the current visitor."""
    _show_feedback()
    mine = sync.identify_current_user()

    if mine and not st.session_state.get(EDIT_MODE_KEY):
        st.markdown("## 🎟️ 我的报名")
        st.markdown(_render_ticket_card(mine), unsafe_allow_html=True)

        edit_col, switch_col = st.columns(2, gap="small")
        with edit_col:
            if st.button("✏️ 修改信息", width='stretch', key="portal_edit"):
                st.session_state[EDIT_MODE_KEY] = True
                st.rerun()
        with switch_col:
            if st.button("👥 不是我，重新报名", width='stretch', key="portal_forget"):
                sync.forget_current_user()
                st.rerun()
        return

    if mine:
        _render_form(sync, mine)
        return

    _render_intro()
    if st.session_state.get(SHOW_FORM_KEY):
        _render_form(sync, None)
    elif st.button("立即报名 →", type="primary", key="portal_start"):
        st.session_state[SHOW_FORM_KEY] = True
        st.rerun()
