"""AI team summary of today's reports, generated through LiteLLM."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from django.conf import settings

logger = logging.getLogger(__name__)

NO_REPORTS_MESSAGE = "No reports available to summarize."
EMPTY_RESPONSE_MESSAGE = "Could not generate a summary, please try again later."
UNAVAILABLE_MESSAGE = "The AI service is temporarily unavailable, please try again later."

SECTION_HEADINGS = (
    "## 📊 Team Summary",
    "## ⚠️ Key Risks",
    "## 💡 Recommendations",
    "## 🏷️ Keywords Cloud",
)

PROMPT_TEMPLATE = """You are an expert operations manager. Here are the daily reports from the team:

{digest}

Please generate a structured daily summary in Markdown format.
Strictly follow this structure:

## 📊 Team Summary
[Brief summary of overall progress. Mention the general team morale/mood.]

## ⚠️ Key Risks
[List any blockers or delays mentioned. If none, say "None detected".]

## 💡 Recommendations
[Actionable advice based on the reports]

## 🏷️ Keywords Cloud
[Comma separated list of 5-10 technical or project keywords]
"""


def _task_line(report) -> str:
    items = getattr(report, "work_items", None)
    if items:
        return ", ".join(f"{item.get('text', '')} ({item.get('progress', 0)}%)" for item in items)
    return report.today_work


def build_digest(reports: Iterable) -> str:
    blocks = []
    for report in reports:
        blocks.append(
            f"User: {report.user_name} (Group: {report.group_name or 'General'}, "
            f"Mood: {report.mood or 'neutral'})\n"
            f"Task: {_task_line(report)}\n"
            f"Issues: {report.problems}\n"
            f"Plan: {report.tomorrow_plan}"
        )
    return "\n---\n".join(blocks)


def build_prompt(digest: str) -> str:
    return PROMPT_TEMPLATE.format(digest=digest)


def _llm_config() -> dict[str, Any]:
    cfg: dict[str, Any] = {
        "model": getattr(settings, "SUMMARY_LLM_MODEL", "gemini/gemini-2.5-flash"),
        "temperature": getattr(settings, "SUMMARY_LLM_TEMPERATURE", 0.3),
    }
    api_base = getattr(settings, "SUMMARY_LLM_API_BASE", None)
    if api_base:
        cfg["api_base"] = api_base
    return cfg


def complete(prompt: str) -> str:
    import litellm

    cfg = _llm_config()
    logger.info("Summary LLM call: model=%s, prompt=%d chars", cfg["model"], len(prompt))

    litellm.drop_params = True
    response = litellm.completion(
        messages=[{"role": "user", "content": prompt}],
        **cfg,
    )
    content = response.choices[0].message.content or ""

    logger.info("Summary LLM response: %d chars", len(content))
    return content


def generate_team_summary(reports) -> str:
    """
    Returns the Markdown summary or one of the fixed fallback messages.
    Never raises.
    """
    reports = list(reports)
    if not reports:
        return NO_REPORTS_MESSAGE

    try:
        text = complete(build_prompt(build_digest(reports)))
    except Exception:
        logger.exception("Team summary generation failed")
        return UNAVAILABLE_MESSAGE

    return text or EMPTY_RESPONSE_MESSAGE


def summary_sections(text: str) -> list[dict]:
    """Splits summary text into heading/paragraph blocks for rendering."""
    blocks = []
    for line in text.split("\n"):
        if line.strip().startswith("##"):
            blocks.append({"kind": "heading", "text": line.replace("#", "").strip()})
        else:
            blocks.append({"kind": "paragraph", "text": line})
    return blocks
