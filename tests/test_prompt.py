from integrations.core.prompt import build_advice_messages, build_summary_prompt


def test_summary_prompt_embeds_text():
    prompt = build_summary_prompt("  Cows moved to the north pasture.  ")

    assert prompt.endswith("Cows moved to the north pasture.")
    assert prompt.lower().startswith("summarize")


def test_advice_messages():
    messages = build_advice_messages("When should I plant beans?")

    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[1]["content"] == "When should I plant beans?"
