"""
Constants, enums, and static values.
"""

from enum import Enum


class FunnelState(str, Enum):
    """Diagnostic funnel states."""

    COLD_START = "cold_start"  # No questions yet
    AWAITING_ANSWER = "awaiting_answer"  # Question displayed
    GENERATING = "generating"  # Generation call in flight
    FINISHED = "finished"  # Terminal
    ERROR = "error"  # Recoverable, user retries


class QuestionType(str, Enum):
    """Diagnostic question input types."""

    BOOLEAN = "boolean"
    SELECT = "select"
    TRI = "tri"  # sim / não / não sei


class ServiceType(str, Enum):
    """Technical nature of the work needed."""

    MECANICA = "mecanica"
    ELETRICA = "eletrica"
    HIDRAULICA = "hidraulica"
    INSTALACAO = "instalacao"
    MANUTENCAO = "manutencao"
    DIAGNOSTICO = "diagnostico"


class FinishReason(str, Enum):
    """Why a funnel stopped asking questions."""

    CONFIDENCE = "confidence"
    MAX_QUESTIONS = "max_questions"
    STUCK = "stuck"


class FunnelStep(str, Enum):
    """Funnel events for structured logs."""

    START = "start"
    ANSWER = "answer"
    GENERATE = "generate"
    MERGE = "merge"
    FINISH = "finish"
    CLASSIFY = "classify"
    ERROR = "error"
    RESET = "reset"
    CLOSE = "close"


DOMAIN_ASSETS: dict[str, list[str]] = {
    "mobilidade": ["carro", "moto", "bicicleta", "patinete"],
    "casa": [
        "ar_condicionado",
        "geladeira",
        "chuveiro",
        "pia",
        "vaso",
        "portao",
        "janela",
    ],
    "tecnologia": ["tv", "celular", "notebook", "impressora"],
}

# Minimum information the generator needs per domain before it may stop asking.
DOMAIN_MINIMUM_INFO: dict[str, str] = {
    "mobilidade": "VEÍCULO (carro/moto/bicicleta) + PROBLEMA (mecânica/elétrica) + SINTOMA específico",
    "casa": "EQUIPAMENTO ou LOCAL + TIPO DE SERVIÇO (hidráulica/elétrica/manutenção) + SINTOMA",
    "tecnologia": "DISPOSITIVO + DEFEITO específico",
}

# Answer values that switch the funnel into free-text capture.
MANUAL_ANSWER_VALUES: frozenset[str] = frozenset({"outro", "other"})

MANUAL_OPTION_LABEL = "Outro / Especificar"
MANUAL_OPTION_VALUE = "outro"

ISSUE_TAGS_LIMIT = 5
SUMMARY_FOR_PROVIDER_LIMIT = 200


def is_manual_answer(value: str) -> bool:
    """Return True when *value* asks for manual free-text input."""
    return value.strip().lower() in MANUAL_ANSWER_VALUES

