"""Choice, free-text and yes/no prompts that suspend a dialog."""

from __future__ import annotations

from helpdesk_bot.schemas import BotReply, PendingPrompt, PromptKind

RETRY_HINT = "I didn't understand. Please choose an option from the list."
CONFIRM_RETRY_HINT = "I didn't understand. Please answer yes or no."
CONFIRM_BUTTONS = ["Yes", "No"]

_YES = {"yes", "y", "yeah", "yep", "sure", "ok", "okay", "true", "1"}
_NO = {"no", "n", "nope", "nah", "false", "2"}


class NoMatch(ValueError):
    """Raised when a reply does not answer the pending prompt."""


def choice(text: str, choices: list[str]) -> PendingPrompt:
    return PendingPrompt(kind=PromptKind.CHOICE, text=text, choices=list(choices))


def text(prompt_text: str) -> PendingPrompt:
    return PendingPrompt(kind=PromptKind.TEXT, text=prompt_text)


def confirm(prompt_text: str) -> PendingPrompt:
    return PendingPrompt(kind=PromptKind.CONFIRM, text=prompt_text)


def render(prompt: PendingPrompt, *, retry: bool = False) -> BotReply:
    """Build the message that presents ``prompt`` to the user."""
    body = prompt.text
    if retry:
        hint = CONFIRM_RETRY_HINT if prompt.kind == PromptKind.CONFIRM else RETRY_HINT
        body = f"{hint}\n{prompt.text}"
    if prompt.kind == PromptKind.CHOICE:
        return BotReply(text=body, buttons=list(prompt.choices))
    if prompt.kind == PromptKind.CONFIRM:
        return BotReply(text=body, buttons=list(CONFIRM_BUTTONS))
    return BotReply(text=body)


def parse_choice(prompt: PendingPrompt, reply: str) -> str:
    """Match a reply to one of the choices by value or 1-based number."""
    answer = reply.strip().lower()
    for index, option in enumerate(prompt.choices, start=1):
        if answer == option.lower() or answer == str(index):
            return option
    raise NoMatch(reply)


def parse_confirm(reply: str) -> bool:
    answer = reply.strip().lower().rstrip("!.")
    if answer in _YES:
        return True
    if answer in _NO:
        return False
    raise NoMatch(reply)


def parse(prompt: PendingPrompt, reply: str) -> str | bool:
    """Interpret ``reply`` as the answer to ``prompt``.

    Free-text prompts accept any reply verbatim, including an empty one.
    """
    if prompt.kind == PromptKind.CHOICE:
        return parse_choice(prompt, reply)
    if prompt.kind == PromptKind.CONFIRM:
        return parse_confirm(reply)
    return reply
