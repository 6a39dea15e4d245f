"""Tests for the agent prompts."""

from reparai.config.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    build_analysis_input,
    build_question_generation_input,
    build_question_generation_system_prompt,
)


def test_question_prompt_is_accented_portuguese():
    prompt = build_question_generation_system_prompt("casa", 0.7)
    assert prompt.startswith("Você é um assistente técnico")
    assert "(sim / não / não sei)" in prompt
    assert '"confidence" >= 0.7' in prompt
    assert "Voce e " not in prompt


def test_question_input_keeps_answers_unescaped():
    message = build_question_generation_input("casa", {"q1": "Aquecedor a gás"}, "não esquenta")
    assert "Aquecedor a gás" in message
    assert 'Descrição do usuário: "não esquenta"' in message


def test_analysis_prompts_are_accented_portuguese():
    assert ANALYSIS_SYSTEM_PROMPT.startswith("Você é um especialista em diagnóstico")
    message = build_analysis_input("mobilidade", {"q1": "bicicleta"}, None)
    assert 'Analise este pedido no domínio "mobilidade"' in message
    assert "Texto do usuário: N/A" in message
