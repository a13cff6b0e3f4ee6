"""Decision providers used when the engine cannot resolve a file on its own."""

from collections import deque
from typing import Optional, Protocol

import click


class DecisionProvider(Protocol):
    """Answers a question with a short, lower-cased response."""

    def ask(self, name: str, question: str) -> str:
        """Ask about one file and return the normalized response.

        Args:
            name: File the question is about
            question: Question text including the available choices

        Returns:
            Stripped, lower-cased answer (may be empty)
        """
        ...


def normalize_answer(answer: str) -> str:
    return answer.strip().lower()


class InteractivePrompt:
    """Asks the operator on the terminal and blocks until they answer."""

    def ask(self, name: str, question: str) -> str:
        answer = click.prompt(
            click.style(question, reverse=True),
            default="",
            show_default=False,
            prompt_suffix=" ",
        )
        return normalize_answer(answer)


class ScriptedPrompt:
    """Answers from a script instead of the terminal.

    Answers are looked up by file name first, then taken from the queue of
    positional answers, then fall back to the default.

    Examples:
        >>> prompt = ScriptedPrompt(by_name={"id_rsa": "p"}, default="u")
        >>> prompt.ask("id_rsa", "Choose an action")
        'p'
        >>> prompt.ask("other", "Choose an action")
        'u'
    """

    def __init__(
        self,
        answers: Optional[list[str]] = None,
        by_name: Optional[dict[str, str]] = None,
        default: str = "",
    ):
        self._queue = deque(answers or [])
        self.by_name = dict(by_name or {})
        self.default = default
        self.questions: list[tuple[str, str]] = []

    def ask(self, name: str, question: str) -> str:
        self.questions.append((name, question))
        if name in self.by_name:
            return normalize_answer(self.by_name[name])
        if self._queue:
            return normalize_answer(self._queue.popleft())
        return normalize_answer(self.default)
