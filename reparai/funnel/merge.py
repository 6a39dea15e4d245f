"""Merge generated questions into the funnel history."""

from collections.abc import Iterable, Sequence

from reparai.funnel.models import DiagnosticQuestion


def _normalize_text(text: str) -> str:
    return text.strip().casefold()


def _free_id(base: str, taken: set[str]) -> str:
    n = 1
    while f"{base}_{n}" in taken:
        n += 1
    return f"{base}_{n}"


def merge_questions(
    history: Sequence[DiagnosticQuestion],
    candidates: Iterable[DiagnosticQuestion],
) -> list[DiagnosticQuestion]:
    """Return the candidates that are new to *history*, ready to append.

    A candidate is dropped when its text matches, case-insensitively, a question
    already in history or one accepted earlier in the same batch. A kept
    candidate whose id is already taken gets the id ``<id>_<n>`` with the
    smallest free ``n``. Neither argument is modified.
    """
    seen_texts = {_normalize_text(q.text) for q in history}
    taken_ids = {q.id for q in history}
    accepted: list[DiagnosticQuestion] = []

    for candidate in candidates:
        text_key = _normalize_text(candidate.text)
        if text_key in seen_texts:
            continue
        if candidate.id in taken_ids:
            candidate = candidate.model_copy(
                update={"id": _free_id(candidate.id, taken_ids)}
            )
        seen_texts.add(text_key)
        taken_ids.add(candidate.id)
        accepted.append(candidate)

    return accepted
