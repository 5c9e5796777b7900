"""Interactive yes/no confirmation.

A run shares a single confirmer for every question it asks (removals
and the optional install step). The confirmer is acquired through
:func:`confirmer_scope`, which closes it on every exit path.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Protocol

import typer

from cleaninstall.utils.formatting import print_warning

logger = logging.getLogger(__name__)

# Case-insensitive answers that count as "yes"; everything else is "no"
AFFIRMATIVE_ANSWERS: frozenset[str] = frozenset({"y", "yes"})


class Confirmer(Protocol):
    """Capability that asks the user a question and returns the raw answer."""

    def ask(self, question: str) -> str:
        """Ask a question and return the answer as typed."""
        ...

    def close(self) -> None:
        """Release the underlying input channel."""
        ...


ConfirmerFactory = Callable[[], Confirmer]


def is_affirmative(answer: str | None) -> bool:
    """Check whether an answer confirms the question.

    Only "y" and "yes" (in any letter case) are affirmative; surrounding
    whitespace from line input is ignored. Empty input is a denial.

    Args:
        answer: Raw answer returned by a confirmer.

    Returns:
        True if the answer is affirmative.
    """
    if answer is None:
        return False
    return answer.strip().lower() in AFFIRMATIVE_ANSWERS


def confirm(confirmer: Confirmer, question: str) -> bool:
    """Ask ``question`` through ``confirmer`` and interpret the answer.

    A confirmer that cannot deliver an answer (input aborted or
    exhausted, or the confirmer already closed) counts as a denial.
    """
    try:
        answer = confirmer.ask(question)
    except (typer.Abort, EOFError, RuntimeError) as e:
        logger.warning("No answer to %r, treating it as 'no': %r", question.strip(), e)
        print_warning("No answer received, treating it as 'no'.")
        return False
    return is_affirmative(answer)


class PromptConfirmer:
    """Confirmer reading answers from the terminal via Typer's prompt."""

    def __init__(self) -> None:
        self._closed = False

    def ask(self, question: str) -> str:
        """Prompt on the terminal and return the typed line.

        Raises:
            RuntimeError: If the confirmer was already closed.
        """
        if self._closed:
            msg = "Confirmer is closed"
            raise RuntimeError(msg)
        answer: str = typer.prompt(question, default="", show_default=False, prompt_suffix="")
        return answer

    def close(self) -> None:
        """Mark the confirmer as closed; further questions are rejected."""
        self._closed = True


@contextmanager
def confirmer_scope(
    factory: ConfirmerFactory | None = None,
    *,
    needed: bool,
) -> Iterator[Confirmer | None]:
    """Acquire a confirmer for the duration of a run.

    Args:
        factory: Callable creating the confirmer. Defaults to PromptConfirmer.
        needed: If False, nothing is acquired and None is yielded.

    Yields:
        The confirmer, or None when not needed.
    """
    if not needed:
        yield None
        return

    confirmer = (factory or PromptConfirmer)()
    try:
        yield confirmer
    finally:
        logger.debug("Closing confirmer")
        confirmer.close()
