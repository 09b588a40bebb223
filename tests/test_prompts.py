import pytest

from helpdesk_bot import prompts
from helpdesk_bot.schemas import PromptKind


def test_choice_matches_value_case_insensitively_or_by_number():
    prompt = prompts.choice("which severity?", ["high", "normal", "low"])

    assert prompts.parse(prompt, "High") == "high"
    assert prompts.parse(prompt, " normal ") == "normal"
    assert prompts.parse(prompt, "3") == "low"


def test_choice_rejects_unknown_option():
    prompt = prompts.choice("which severity?", ["high", "normal", "low"])

    with pytest.raises(prompts.NoMatch):
        prompts.parse(prompt, "critical")


@pytest.mark.parametrize("reply", ["yes", "Yes", "y", "sure", "ok!"])
def test_confirm_accepts_affirmatives(reply):
    assert prompts.parse(prompts.confirm("ok?"), reply) is True


@pytest.mark.parametrize("reply", ["no", "No", "n", "nope"])
def test_confirm_accepts_negatives(reply):
    assert prompts.parse(prompts.confirm("ok?"), reply) is False


def test_confirm_rejects_anything_else():
    with pytest.raises(prompts.NoMatch):
        prompts.parse(prompts.confirm("ok?"), "maybe later")


def test_text_prompt_accepts_any_reply_verbatim():
    prompt = prompts.text("category?")

    assert prompt.kind == PromptKind.TEXT
    assert prompts.parse(prompt, "") == ""
    assert prompts.parse(prompt, "  Hardware ") == "  Hardware "


def test_render_shows_buttons_for_choice_and_confirm():
    choice = prompts.render(prompts.choice("which severity?", ["high", "normal", "low"]))
    confirm = prompts.render(prompts.confirm("correct?"))
    text = prompts.render(prompts.text("category?"))

    assert choice.text == "which severity?"
    assert choice.buttons == ["high", "normal", "low"]
    assert confirm.buttons == ["Yes", "No"]
    assert text.buttons == []


def test_render_retry_prefixes_hint():
    reply = prompts.render(prompts.confirm("correct?"), retry=True)

    assert reply.text.startswith(prompts.CONFIRM_RETRY_HINT)
    assert reply.text.endswith("correct?")
