from intellisource.data_access.models import Category, Report
from intellisource.services.ai_service import FALLBACK_REPLY, AIService
from intellisource.services.assistant_service import build_catalog_context


def test_catalog_context_lists_every_report() -> None:
    energy = Category(id=1, name="Energy", slug="energy")
    reports = [
        Report(id=1, title="Global Energy Outlook", slug="global-energy-outlook", category_id=1,
               category=energy, summary="Oil, gas and renewables", price=3500),
        Report(id=2, title="Untitled Draft", slug="untitled-draft", category_id=1, price=0),
    ]
    context = build_catalog_context(reports)
    assert "- ID: global-energy-outlook, Title: Global Energy Outlook, Summary: Oil, gas and renewables" in context
    assert "(Category: Energy, Price: $3,500.00)" in context
    assert "ID: untitled-draft" in context
    assert "Do not make up reports" in context


def test_catalog_context_for_empty_catalog() -> None:
    assert "No reports are currently available." in build_catalog_context([])


class _FakeModels:
    def __init__(self, text):
        self.text = text
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if isinstance(self.text, Exception):
            raise self.text
        return type("Response", (), {"text": self.text})()


def _ai_with(text) -> tuple[AIService, _FakeModels]:
    ai = AIService(api_key="", model="gemini-test")
    models = _FakeModels(text)
    ai.client = type("Client", (), {"models": models})()
    return ai, models


def test_ai_service_sends_history_and_system_instruction() -> None:
    ai, models = _ai_with("Try the Global Energy Outlook.")
    reply = ai.chat("catalog context", [("model", "Hello!"), ("user", "Energy reports?")])

    assert reply == "Try the Global Energy Outlook."
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert [c.role for c in call["contents"]] == ["model", "user"]
    assert call["contents"][1].parts[0].text == "Energy reports?"
    assert call["config"].system_instruction == "catalog context"


def test_ai_service_falls_back_on_errors_and_empty_answers() -> None:
    ai, _ = _ai_with(RuntimeError("quota exhausted"))
    assert ai.chat("ctx", [("user", "hi")]) == FALLBACK_REPLY

    ai, _ = _ai_with(None)
    assert ai.chat("ctx", [("user", "hi")]) == FALLBACK_REPLY
