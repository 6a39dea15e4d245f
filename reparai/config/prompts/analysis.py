"""
Request analysis agent prompts.
"""

import json
from collections.abc import Mapping

from reparai.config.constants import (
    DOMAIN_ASSETS,
    ISSUE_TAGS_LIMIT,
    SUMMARY_FOR_PROVIDER_LIMIT,
    ServiceType,
)

ANALYSIS_SYSTEM_PROMPT = """Você é um especialista em diagnóstico de manutenção e reparos.
Sua tarefa é devolver uma TAXONOMIA ESTRUTURADA em 3 dimensões (domínio, equipamento,
tipo de serviço) para o matching de prestadores.

Retorne APENAS JSON no formato pedido."""


def build_analysis_input(
    domain: str,
    answers: Mapping[str, str],
    user_text: str | None = None,
) -> str:
    """Build the user message for the request analyzer."""
    assets = "\n".join(
        f'   - Se {d}: {", ".join(f"{a!r}" for a in items)}' for d, items in DOMAIN_ASSETS.items()
    )
    services = ", ".join(f'"{st.value}"' for st in ServiceType)
    return f"""Analise este pedido no domínio "{domain}":
Respostas do funil: {json.dumps(dict(answers), ensure_ascii=False)}
Texto do usuário: {user_text or 'N/A'}

Identifique:
1. **asset_type**: o equipamento ou objeto exato.
{assets}
2. **service_type**: um de {services}.
3. **issue_tags**: até {ISSUE_TAGS_LIMIT} etiquetas curtas do problema (ex: ["corrente", "folga"]).
4. **problem_guess**: resumo de 3 a 5 palavras.
5. **confidence**: número entre 0 e 1.
6. **summary_for_provider**: parágrafo técnico de no máximo {SUMMARY_FOR_PROVIDER_LIMIT} caracteres.

Retorne JSON:
{{
  "domain": "{domain}",
  "asset_type": "bicicleta",
  "service_type": "mecanica",
  "issue_tags": ["corrente", "folga"],
  "problem_guess": "Corrente solta/barulho",
  "confidence": 0.85,
  "summary_for_provider": "Cliente relata corrente da bicicleta com folga. Pode precisar de ajuste ou troca."
}}"""
