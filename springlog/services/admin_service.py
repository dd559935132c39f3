"""Admin gate and session state management."""
import streamlit as st
from typing import Tuple

from springlog.utils.config import get_settings


def authenticate_admin(password: str) -> bool:
    """
    Check the admin access code.

    Args:
        password: Access code entered on the gateway

    Returns:
        True if it matches ADMIN_PASSWORD (default "admin")

    Security:
        - Plain-text comparison; this only keeps the dashboard out of casual view
    """
    if not password:
        return False
    return password == get_settings().admin_password


def is_admin_authenticated() -> bool:
    """True if st.session_state['admin_authenticated'] is set."""
    return st.session_state.get("admin_authenticated", False)


def login_admin(password: str) -> Tuple[bool, str]:
    """
    Log in the administrator.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "登录成功") on success
        - (False, "授权码错误，请重试") on failure
    """
    if authenticate_admin(password):
        st.session_state["admin_authenticated"] = True
        return True, "登录成功"
    else:
        return False, "授权码错误，请重试"


def logout_admin() -> None:
    """Clear st.session_state['admin_authenticated']."""
    if "admin_authenticated" in st.session_state:
        del st.session_state["admin_authenticated"]
