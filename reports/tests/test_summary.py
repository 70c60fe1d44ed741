from types import SimpleNamespace
from unittest.mock import patch

from reports.summary import (
    EMPTY_RESPONSE_MESSAGE,
    NO_REPORTS_MESSAGE,
    SECTION_HEADINGS,
    UNAVAILABLE_MESSAGE,
    build_digest,
    build_prompt,
    complete,
    generate_team_summary,
    summary_sections,
)


def make_report(**overrides):
    fields = dict(
        user_name="Alice",
        group_name="Backend",
        mood="happy",
        work_items=[{"id": 1, "text": "API", "progress": 50}, {"id": 2, "text": "Docs", "progress": 100}],
        today_work="API (50%)\nDocs (100%)",
        problems="none",
        tomorrow_plan="tests",
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_digest_lists_each_report():
    digest = build_digest([
        make_report(),
        make_report(user_name="Bob", group_name="", work_items=None, today_work="legacy text"),
    ])
    first, second = digest.split("\n---\n")

    assert first == (
        "User: Alice (Group: Backend, Mood: happy)\n"
        "Task: API (50%), Docs (100%)\n"
        "Issues: none\n"
        "Plan: tests"
    )
    assert second.startswith("User: Bob (Group: General, Mood: happy)\nTask: legacy text")


def test_prompt_requires_four_sections_in_order():
    prompt = build_prompt("DIGEST")
    assert "DIGEST" in prompt
    positions = [prompt.index(heading) for heading in SECTION_HEADINGS]
    assert positions == sorted(positions)


def test_empty_report_list_skips_model():
    with patch("reports.summary.complete") as complete_mock:
        assert generate_team_summary([]) == NO_REPORTS_MESSAGE
    complete_mock.assert_not_called()


def test_model_text_is_returned():
    with patch("reports.summary.complete", return_value="## 📊 Team Summary\nAll good") as complete_mock:
        assert generate_team_summary([make_report()]) == "## 📊 Team Summary\nAll good"
    assert "User: Alice" in complete_mock.call_args.args[0]


def test_empty_model_response():
    with patch("reports.summary.complete", return_value=""):
        assert generate_team_summary([make_report()]) == EMPTY_RESPONSE_MESSAGE


def test_model_failure_degrades_to_message():
    with patch("reports.summary.complete", side_effect=RuntimeError("quota")):
        assert generate_team_summary([make_report()]) == UNAVAILABLE_MESSAGE


def test_complete_uses_configured_model(settings):
    settings.SUMMARY_LLM_MODEL = "openai/gpt-4o-mini"
    settings.SUMMARY_LLM_TEMPERATURE = 0.1
    settings.SUMMARY_LLM_API_BASE = "http://llm.local"
    response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="done"))])

    with patch("litellm.completion", return_value=response) as completion:
        assert complete("hello") == "done"

    kwargs = completion.call_args.kwargs
    assert kwargs["model"] == "openai/gpt-4o-mini"
    assert kwargs["temperature"] == 0.1
    assert kwargs["api_base"] == "http://llm.local"
    assert kwargs["messages"] == [{"role": "user", "content": "hello"}]


def test_summary_sections():
    blocks = summary_sections("## ⚠️ Key Risks\nNone detected")
    assert blocks == [
        {"kind": "heading", "text": "⚠️ Key Risks"},
        {"kind": "paragraph", "text": "None detected"},
    ]
