"""Per-browser-session access to the registration synchronizer."""
import logging
from typing import Optional

import streamlit as st

from springlog.services.identity_marker import is_browser_token, marker_for_browser, new_browser_token
from springlog.services.registration_service import RegistrationSynchronizer
from springlog.services.remote_store import RemoteStoreClient
from springlog.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

SYNC_STATE_KEY = "registration_sync"
BROWSER_TOKEN_PARAM = "visitor"


def get_browser_token() -> str:
    """
    Return the visitor token carried in the page URL, creating one if needed.

    The token stays in st.query_params, so a reload or bookmark of the same
    URL reaches the same identity marker.
    """
    token = st.query_params.get(BROWSER_TOKEN_PARAM)
    if not is_browser_token(token):
        token = new_browser_token()
        st.query_params[BROWSER_TOKEN_PARAM] = token
        logger.info("Issued new visitor token")
    return token


def build_synchronizer(
    browser_token: str,
    settings: Optional[Settings] = None,
    remote: Optional[RemoteStoreClient] = None,
) -> RegistrationSynchronizer:
    """Create a synchronizer for one browser, wired from environment settings."""
    settings = settings or get_settings()
    return RegistrationSynchronizer(
        remote=remote or RemoteStoreClient.from_config(settings),
        marker=marker_for_browser(settings.identity_dir, browser_token),
        cache_path=settings.cache_file,
    )


def get_synchronizer() -> RegistrationSynchronizer:
    """
    Return this session's synchronizer, loading it on first use.

    The instance lives in st.session_state so every rerun of the script sees
    the same collection and current-user id.
    """
    sync = st.session_state.get(SYNC_STATE_KEY)
    if sync is None:
        sync = build_synchronizer(get_browser_token())
        st.session_state[SYNC_STATE_KEY] = sync

    if not sync.is_ready:
        with st.spinner("正在同步报名数据..."):
            sync.load()
    return sync
