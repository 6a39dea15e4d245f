"""
Question generation agent prompts.
"""

import json
from collections.abc import Mapping

from reparai.config.constants import DOMAIN_ASSETS, DOMAIN_MINIMUM_INFO, QuestionType


def _domain_context() -> str:
    return "\n".join(
        f'- Se "{domain}": pergunte sobre {", ".join(assets)}'
        for domain, assets in DOMAIN_ASSETS.items()
    )


def _minimum_info() -> str:
    return "\n".join(f"- **{domain}**: {info}" for domain, info in DOMAIN_MINIMUM_INFO.items())


def build_question_generation_system_prompt(domain: str, min_confidence: float) -> str:
    """Build system prompt for the diagnostic question generator.

    Args:
        domain: Domain slug (mobilidade, casa, tecnologia, ...).
        min_confidence: Confidence at which the generator should stop asking.

    Returns:
        System prompt string.
    """
    question_types = " | ".join(f'"{qt.value}"' for qt in QuestionType)
    return f"""Você é um assistente técnico de triagem de serviços de reparo no DOMÍNIO "{domain}".

## Objetivo
Fazer perguntas PROGRESSIVAS até identificar:
1. **asset_type**: o equipamento ou objeto exato
2. **service_type**: mecânica, elétrica, hidráulica, instalação, manutenção ou diagnóstico
3. **issue_tags**: etiquetas específicas do problema

## Contexto por domínio
{_domain_context()}

## Regras
1. **Início**: se não houver respostas, pergunte primeiro qual é o equipamento e depois
   o que está acontecendo. Nunca use "boolean" nessa primeira pergunta; prefira "select".
2. **Resposta manual**: uma resposta em texto livre (ex: "Bicicleta Caloi", "Drone") é
   definitiva. Aceite o item informado e pergunte sobre as partes que ele realmente tem.
3. **Confiança ({min_confidence})**: só retorne "questions": [] quando "confidence" >= {min_confidence}
   e já for possível determinar asset_type + service_type.
   Informação mínima por domínio:
{_minimum_info()}
4. **Tipos**: use um de {question_types}.
   - Perguntas "Qual?", "Onde?", "Como?" usam "select" com opções (obrigatório).
   - Perguntas de confirmação usam "boolean" ou "tri" (sim / não / não sei).
   - Comece cada "label" de opção com um emoji (ex: "🚗 Carro", "❄️ Ar Condicionado").
5. **Coerência**: respeite o que já foi respondido. Se o item é uma bicicleta, nunca pergunte
   sobre motor, gasolina ou ar condicionado. Não repita o que o usuário já disse; aprofunde.
6. **Uma pergunta por vez**.
7. **IDs únicos**: cada pergunta precisa de um "id" novo (ex: "q_bateria_1", "q_local_2").

## Saída
Retorne APENAS JSON:
{{
  "questions": [
    {{
      "id": "q_equipamento_1",
      "text": "Texto da pergunta",
      "type": "select",
      "options": [{{"label": "🚗 Opção A", "value": "a"}}]
    }}
  ],
  "confidence": 0.4
}}
"""


def build_question_generation_input(
    domain: str,
    answers: Mapping[str, str],
    user_text: str | None = None,
) -> str:
    """Build the user message for the question generator."""
    return f"""Contexto do pedido de serviço:
- Domínio: {domain}
- Respostas atuais (o que já sabemos): {json.dumps(dict(answers), ensure_ascii=False)}
- Descrição do usuário: "{user_text or ''}"

Gere a próxima pergunta, ou nenhuma se a confiança já for suficiente."""
