"""Unit tests for admin_service."""
from unittest.mock import patch

from springlog.services.admin_service import (
    authenticate_admin,
    is_admin_authenticated,
    login_admin,
    logout_admin
)


class TestAuthenticateAdmin:
    """Test authenticate_admin function."""

    def test_authenticate_with_correct_code(self, monkeypatch):
        monkeypatch.setenv("ADMIN_PASSWORD", "spring2026")
        assert authenticate_admin("spring2026") is True

    def test_authenticate_with_wrong_code(self, monkeypatch):
        monkeypatch.setenv("ADMIN_PASSWORD", "spring2026")
        assert authenticate_admin("wrong") is False

    def test_authenticate_with_empty_code(self, monkeypatch):
        monkeypatch.setenv("ADMIN_PASSWORD", "spring2026")
        assert authenticate_admin("") is False

    def test_authenticate_uses_default_code(self, monkeypatch):
        monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
        assert authenticate_admin("admin") is True


class TestIsAdminAuthenticated:
    """Test is_admin_authenticated function."""

    @patch('springlog.services.admin_service.st')
    def test_returns_true_when_authenticated(self, mock_st):
        mock_st.session_state.get.return_value = True

        assert is_admin_authenticated() is True
        mock_st.session_state.get.assert_called_once_with("admin_authenticated", False)

    @patch('springlog.services.admin_service.st')
    def test_returns_false_when_not_authenticated(self, mock_st):
        mock_st.session_state.get.return_value = False
        assert is_admin_authenticated() is False


class TestLoginAdmin:
    """Test login_admin function."""

    @patch('springlog.services.admin_service.authenticate_admin')
    @patch('springlog.services.admin_service.st')
    def test_login_success(self, mock_st, mock_auth):
        mock_auth.return_value = True
        mock_st.session_state = {}

        success, message = login_admin("admin")

        assert success is True
        assert message == "登录成功"
        assert mock_st.session_state["admin_authenticated"] is True

    @patch('springlog.services.admin_service.authenticate_admin')
    @patch('springlog.services.admin_service.st')
    def test_login_failure(self, mock_st, mock_auth):
        mock_auth.return_value = False
        mock_st.session_state = {}

        success, message = login_admin("nope")

        assert success is False
        assert message == "授权码错误，请重试"
        assert "admin_authenticated" not in mock_st.session_state


class TestLogoutAdmin:
    """Test logout_admin function."""

    @patch('springlog.services.admin_service.st')
    def test_logout_clears_session_state(self, mock_st):
        mock_st.session_state = {"admin_authenticated": True}

        logout_admin()

        assert "admin_authenticated" not in mock_st.session_state

    @patch('springlog.services.admin_service.st')
    def test_logout_when_not_authenticated(self, mock_st):
        mock_st.session_state = {}

        logout_admin()

        assert "admin_authenticated" not in mock_st.session_state
