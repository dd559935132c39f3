"""
Registration summary service for the admin dashboard.

This module provides:
- Aggregate counts for the dashboard header (carpool balance, diets)
- CSV snapshots of the collection (for download and for the LLM prompt)
- AI-generated logistics summaries using the OpenAI chat API
"""
import csv
import io
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import openai
from openai import OpenAI

from springlog.models.registration import CommutePreference, Registration
from springlog.utils.config import get_settings

logger = logging.getLogger(__name__)

SUMMARY_CSV_HEADER = ["姓名", "工号", "饮食禁忌", "拼车意向"]
EXPORT_CSV_HEADER = ["ID", "姓名", "工号", "联系方式", "饮食禁忌", "活动兴趣", "拼车意向", "报名时间"]


@dataclass
class RegistrationSummary:
    """Structured result of the AI analysis."""

    summary: str
    key_insights: List[str] = field(default_factory=list)


@dataclass
class RegistrationStats:
    """Aggregate numbers shown above the admin table."""

    total: int
    needs_ride: int
    offers_ride: int
    self_drive: int
    special_diet: int

    @property
    def ride_gap(self) -> int:
        """Riders without a matching driver; negative means spare drivers."""
        return self.needs_ride - self.offers_ride


def compute_stats(registrations: Iterable[Registration]) -> RegistrationStats:
    registrations = list(registrations)
    commute = Counter(r.commute_preference for r in registrations)
    return RegistrationStats(
        total=len(registrations),
        needs_ride=commute[CommutePreference.NEEDS_RIDE],
        offers_ride=commute[CommutePreference.OFFERS_RIDE],
        self_drive=commute[CommutePreference.SELF_DRIVE],
        special_diet=sum(1 for r in registrations if r.has_special_diet),
    )


def _write_csv(header: List[str], rows: Iterable[List[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def build_summary_csv(registrations: Iterable[Registration]) -> str:
    """
    Build the delimited snapshot sent to the summarization model.

    Only name, employee number, dietary and commute preferences are shared.
    """
    return _write_csv(
        SUMMARY_CSV_HEADER,
        (
            [r.name, r.employee_identifier, r.dietary_preference, r.commute_preference.label]
            for r in registrations
        ),
    )


def export_registrations_csv(registrations: Iterable[Registration]) -> str:
    """Full registration table as CSV for download."""
    return _write_csv(
        EXPORT_CSV_HEADER,
        (
            [
                r.id,
                r.name,
                r.employee_identifier,
                r.contact_info,
                r.dietary_preference,
                r.activity_interest,
                r.commute_preference.label,
                r.submitted_at,
            ]
            for r in registrations
        ),
    )


def parse_summary_response(text: str) -> RegistrationSummary:
    """
    Parse the model's JSON answer.

    Expected shape: {"summary": str, "keyInsights": [str, ...]}. Anything
    else degrades to the raw text as summary with no insights.
    """
    raw = (text or "").strip()
    try:
        payload = json.loads(raw)
    except ValueError:
        return RegistrationSummary(summary=raw)

    if not isinstance(payload, dict) or not isinstance(payload.get("summary"), str):
        return RegistrationSummary(summary=raw)

    insights = payload.get("keyInsights", [])
    if not isinstance(insights, list):
        insights = []

    return RegistrationSummary(
        summary=payload["summary"].strip(),
        key_insights=[str(item).strip() for item in insights if str(item).strip()],
    )


def analyze_registration_trends(
    csv_text: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> Tuple[bool, str, Optional[RegistrationSummary]]:
    """
    Ask the model for a logistics summary of the registrations.

    Args:
        csv_text: Snapshot from build_summary_csv()
        api_key: OpenAI API key (defaults to the configured OPENAI_API_KEY)
        model: Model name (defaults to the configured OPENAI_MODEL)

    Returns:
        Tuple of (success: bool, message: str, summary)
        If failure, message contains the error and summary is None
    """
    if not csv_text or not csv_text.strip():
        return False, "没有可分析的报名数据", None

    settings = get_settings()
    api_key = api_key or settings.openai_api_key
    if not api_key:
        logger.warning("OPENAI_API_KEY not set, skipping summary")
        return False, "未设置 OPENAI_API_KEY，请检查 .env 配置", None

    model = model or settings.openai_model

    system_prompt = """你是一位资深的活动策划专家。
请根据报名数据，给出一份简洁的物流需求总结，覆盖拼车缺口分析与饮食习惯分布。

请只返回 JSON 对象，格式如下：
{"summary": "物流需求总体总结", "keyInsights": ["关键洞察点", "..."]}

使用中文回答。"""

    user_prompt = f"""请分析以下报名数据：

{csv_text}"""

    try:
        client = OpenAI(api_key=api_key)
        logger.info("Requesting registration summary (%d rows)", csv_text.count("\n"))

        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            response_format={"type": "json_object"},
            max_completion_tokens=2000,
            timeout=60
        )

        if not response.choices:
            return False, "API 返回格式错误：没有回应选项", None

        content = response.choices[0].message.content
        if not content or not content.strip():
            return False, "API 返回空白内容", None

        return True, "分析完成", parse_summary_response(content)

    except openai.AuthenticationError as e:
        logger.error(f"OpenAI authentication error: {e}")
        return False, f"OpenAI API 认证失败：{e}", None
    except openai.RateLimitError as e:
        logger.error(f"OpenAI rate limit error: {e}")
        return False, f"API 速率限制：{e}", None
    except openai.APIConnectionError as e:
        logger.error(f"OpenAI connection error: {e}")
        return False, f"无法连接到 OpenAI API：{e}", None
    except openai.APIError as e:
        logger.error(f"OpenAI API error: {e}")
        return False, f"OpenAI API 错误：{e}", None
