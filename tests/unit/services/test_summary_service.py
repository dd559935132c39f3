"""Unit tests for summary_service."""
import json
from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest

from springlog.models.registration import CommutePreference, Registration
from springlog.services.summary_service import (
    RegistrationSummary,
    analyze_registration_trends,
    build_summary_csv,
    compute_stats,
    export_registrations_csv,
    parse_summary_response,
)


@pytest.fixture
def registrations():
    return [
        Registration(
            id="user-1",
            name="张三",
            employee_identifier="EMP-001",
            contact_info="138",
            dietary_preference="Allergy: 花生, 海鲜",
            commute_preference=CommutePreference.NEEDS_RIDE,
            submitted_at="2026-03-20 10:00:00",
        ),
        Registration(
            id="user-2",
            name="李四",
            employee_identifier="EMP-002",
            contact_info="139",
            commute_preference=CommutePreference.NEEDS_RIDE,
            submitted_at="2026-03-20 11:00:00",
        ),
        Registration(
            id="user-3",
            name="王五",
            employee_identifier="EMP-003",
            contact_info="137",
            dietary_preference="Halal",
            commute_preference=CommutePreference.OFFERS_RIDE,
            submitted_at="2026-03-20 12:00:00",
        ),
    ]


def mock_completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


class TestComputeStats:
    """Test compute_stats."""

    def test_counts(self, registrations):
        stats = compute_stats(registrations)

        assert stats.total == 3
        assert stats.needs_ride == 2
        assert stats.offers_ride == 1
        assert stats.self_drive == 0
        assert stats.special_diet == 2
        assert stats.ride_gap == 1

    def test_empty(self):
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.ride_gap == 0


class TestCsv:
    """Test CSV snapshots."""

    def test_summary_csv_has_header_and_rows(self, registrations):
        lines = build_summary_csv(registrations).split("\n")

        assert lines[0] == "姓名,工号,饮食禁忌,拼车意向"
        assert lines[2] == "李四,EMP-002,None,需拼车"
        assert len(lines) == 4

    def test_summary_csv_quotes_commas(self, registrations):
        csv_text = build_summary_csv(registrations)
        assert '"Allergy: 花生, 海鲜"' in csv_text

    def test_summary_csv_excludes_contact_info(self, registrations):
        assert "138" not in build_summary_csv(registrations)

    def test_export_includes_all_columns(self, registrations):
        lines = export_registrations_csv(registrations).split("\n")

        assert lines[0].startswith("ID,姓名,工号,联系方式")
        assert lines[3] == "user-3,王五,EMP-003,137,Halal,,有车出车,2026-03-20 12:00:00"


class TestParseSummaryResponse:
    """Test parse_summary_response."""

    def test_valid_json(self):
        text = json.dumps({"summary": "拼车紧张", "keyInsights": ["需要 1 辆车", " "]}, ensure_ascii=False)

        result = parse_summary_response(text)

        assert result == RegistrationSummary(summary="拼车紧张", key_insights=["需要 1 辆车"])

    def test_plain_text_degrades_to_summary(self):
        result = parse_summary_response("整体情况良好")
        assert result == RegistrationSummary(summary="整体情况良好", key_insights=[])

    def test_wrong_shape_degrades_to_raw_text(self):
        text = json.dumps({"report": "x"})
        assert parse_summary_response(text).summary == text

    def test_non_list_insights_are_dropped(self):
        result = parse_summary_response(json.dumps({"summary": "ok", "keyInsights": "one"}))
        assert result.key_insights == []


class TestAnalyzeRegistrationTrends:
    """Test analyze_registration_trends."""

    def test_empty_csv(self):
        success, message, summary = analyze_registration_trends("")
        assert success is False
        assert summary is None

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        success, message, summary = analyze_registration_trends("a,b")

        assert success is False
        assert "OPENAI_API_KEY" in message

    @patch("springlog.services.summary_service.OpenAI")
    def test_success(self, mock_openai):
        client = mock_openai.return_value
        client.chat.completions.create.return_value = mock_completion(
            json.dumps({"summary": "需要增加车辆", "keyInsights": ["缺 1 个座位"]}, ensure_ascii=False)
        )

        success, message, summary = analyze_registration_trends("a,b", api_key="sk-test", model="test-model")

        assert success is True
        assert summary.summary == "需要增加车辆"
        assert summary.key_insights == ["缺 1 个座位"]
        mock_openai.assert_called_once_with(api_key="sk-test")
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "a,b" in kwargs["messages"][1]["content"]

    @patch("springlog.services.summary_service.OpenAI")
    def test_defaults_come_from_settings(self, mock_openai, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
        monkeypatch.setenv("OPENAI_MODEL", "env-model")
        client = mock_openai.return_value
        client.chat.completions.create.return_value = mock_completion('{"summary": "ok", "keyInsights": []}')

        success, _, _ = analyze_registration_trends("a,b")

        assert success is True
        mock_openai.assert_called_once_with(api_key="sk-from-env")
        assert client.chat.completions.create.call_args.kwargs["model"] == "env-model"

    @patch("springlog.services.summary_service.OpenAI")
    def test_non_json_answer_is_kept_as_summary(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = mock_completion("纯文本总结")

        success, _, summary = analyze_registration_trends("a,b", api_key="sk-test")

        assert success is True
        assert summary.summary == "纯文本总结"
        assert summary.key_insights == []

    @patch("springlog.services.summary_service.OpenAI")
    def test_empty_answer(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = mock_completion("")

        success, _, summary = analyze_registration_trends("a,b", api_key="sk-test")

        assert success is False
        assert summary is None

    @patch("springlog.services.summary_service.OpenAI")
    def test_no_choices(self, mock_openai):
        response = MagicMock()
        response.choices = []
        mock_openai.return_value.chat.completions.create.return_value = response

        success, _, _ = analyze_registration_trends("a,b", api_key="sk-test")

        assert success is False

    @patch("springlog.services.summary_service.OpenAI")
    def test_connection_error(self, mock_openai):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_openai.return_value.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

        success, message, summary = analyze_registration_trends("a,b", api_key="sk-test")

        assert success is False
        assert "无法连接" in message
        assert summary is None
