"""Tests for merging generated questions into history."""

from reparai.funnel.merge import merge_questions
from reparai.funnel.models import DiagnosticQuestion


def _q(qid: str, text: str) -> DiagnosticQuestion:
    return DiagnosticQuestion(id=qid, text=text, type="boolean")


def test_merge_appends_new_questions_in_order():
    history = [_q("q1", "Qual equipamento?")]
    merged = merge_questions(history, [_q("q2", "Esta ligado?"), _q("q3", "Faz barulho?")])
    assert [q.id for q in merged] == ["q2", "q3"]


def test_merge_drops_case_insensitive_duplicate_text():
    history = [_q("q1", "Qual equipamento?")]
    merged = merge_questions(history, [_q("q9", "QUAL EQUIPAMENTO?")])
    assert merged == []


def test_merge_renames_colliding_id_with_different_text():
    history = [_q("q1", "Qual equipamento?")]
    merged = merge_questions(history, [_q("q1", "Onde fica o vazamento?")])
    assert len(merged) == 1
    assert merged[0].id == "q1_1"
    assert merged[0].text == "Onde fica o vazamento?"


def test_merge_picks_next_free_suffix():
    history = [_q("q1", "A?"), _q("q1_1", "B?")]
    merged = merge_questions(history, [_q("q1", "C?")])
    assert merged[0].id == "q1_2"


def test_merge_dedupes_within_candidate_batch():
    merged = merge_questions([], [_q("q1", "Liga?"), _q("q1", "liga?"), _q("q1", "Esquenta?")])
    assert [(q.id, q.text) for q in merged] == [("q1", "Liga?"), ("q1_1", "Esquenta?")]


def test_merge_does_not_modify_inputs():
    history = [_q("q1", "A?")]
    candidate = _q("q1", "B?")
    merge_questions(history, [candidate])
    assert len(history) == 1
    assert candidate.id == "q1"
