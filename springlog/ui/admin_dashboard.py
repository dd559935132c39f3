"""Admin dashboard: aggregate counts, AI summary and the registration table."""
import logging
from typing import Dict, List, MutableMapping

import streamlit as st

from springlog.models.registration import Registration, split_dietary
from springlog.services.admin_service import is_admin_authenticated, logout_admin
from springlog.services.registration_service import RegistrationSynchronizer
from springlog.services.summary_service import (
    analyze_registration_trends,
    build_summary_csv,
    compute_stats,
    export_registrations_csv,
)
from springlog.utils.date_utils import timestamp_date

logger = logging.getLogger(__name__)

ANALYSIS_KEY = "admin_analysis"
ANALYSIS_BUSY_KEY = "admin_analysis_busy"

SOURCE_LABELS = {
    "remote": "云端数据库",
    "cache": "本地缓存",
    "seed": "示例数据",
}


def registration_table_rows(registrations: List[Registration]) -> List[Dict[str, str]]:
    """Rows for st.dataframe, newest first as held by the synchronizer."""
    rows = []
    for r in registrations:
        category, _ = split_dietary(r.dietary_preference)
        rows.append({
            "姓名": r.name,
            "工号": r.employee_identifier,
            "联系方式": r.contact_info,
            "出行": r.commute_preference.label,
            "饮食": "常规" if category in ("None", "") else "特殊",
            "活动兴趣": r.activity_interest,
            "报名日期": timestamp_date(r.submitted_at),
        })
    return rows


def _render_setup_guidance(sync: RegistrationSynchronizer) -> None:
    issues = sync.remote.get_diagnostics()
    if not issues:
        return
    with st.expander("⚙️ 云端数据库未配置，当前仅在本地生效", expanded=False):
        for issue in issues:
            st.markdown(f"- {issue}")
        st.caption("在 .env 中设置 SUPABASE_URL 与 SUPABASE_ANON_KEY 后重启应用。")


def run_pending_analysis(state: MutableMapping, registrations: List[Registration]) -> bool:
    """
    Run an analysis requested on the previous script run.

    Stores the outcome under ANALYSIS_KEY and always clears the busy flag.

    Returns:
        True if an analysis ran
    """
    if not state.get(ANALYSIS_BUSY_KEY):
        return False

    try:
        success, message, summary = analyze_registration_trends(build_summary_csv(registrations))
    finally:
        state[ANALYSIS_BUSY_KEY] = False

    state[ANALYSIS_KEY] = {"success": success, "message": message, "summary": summary}
    return True


def _render_analysis(sync: RegistrationSynchronizer) -> None:
    busy = st.session_state.get(ANALYSIS_BUSY_KEY, False)

    if st.button(
        "✨ AI 物流分析",
        type="primary",
        disabled=busy,
        key="admin_analyze",
    ):
        # The next run draws the button disabled and performs the request
        st.session_state[ANALYSIS_BUSY_KEY] = True
        st.rerun()

    if busy:
        with st.spinner("正在生成物流报告..."):
            run_pending_analysis(st.session_state, sync.registrations)
        st.rerun()

    result = st.session_state.get(ANALYSIS_KEY)
    if not result:
        return

    if not result["success"]:
        st.error(f"❌ {result['message']}")
        return

    summary = result["summary"]
    st.markdown("#### 🤖 AI 物流报告")
    st.write(summary.summary)
    for index, insight in enumerate(summary.key_insights, 1):
        st.markdown(f"{index}. {insight}")


def render_admin_dashboard(sync: RegistrationSynchronizer) -> None:
    """Render the dashboard; callers route unauthenticated users to the gateway."""
    if not is_admin_authenticated():
        st.warning("请先通过管理员通道登录")
        return

    header_col, logout_col = st.columns([4, 1], gap="small")
    with header_col:
        st.markdown("## 📊 管理后台")
        st.caption(f"数据来源：{SOURCE_LABELS.get(sync.source, '未知')}")
    with logout_col:
        if st.button("🚪 退出", width='stretch', key="admin_logout"):
            logout_admin()
            st.session_state.role = "none"
            st.rerun()

    _render_setup_guidance(sync)

    registrations = sync.registrations
    stats = compute_stats(registrations)

    total_col, need_col, offer_col, diet_col = st.columns(4)
    total_col.metric("报名人数", stats.total)
    need_col.metric("需拼车", stats.needs_ride)
    offer_col.metric("可出车", stats.offers_ride)
    diet_col.metric("特殊饮食", stats.special_diet)

    if stats.ride_gap > 0:
        st.warning(f"🚗 拼车缺口：还有 {stats.ride_gap} 人需要搭车")

    _render_analysis(sync)

    st.markdown("### 报名列表")
    st.dataframe(registration_table_rows(registrations), width='stretch', hide_index=True)

    st.download_button(
        "📥 导出 CSV",
        data=export_registrations_csv(registrations).encode("utf-8-sig"),
        file_name="registrations.csv",
        mime="text/csv",
        key="admin_export_csv",
    )
