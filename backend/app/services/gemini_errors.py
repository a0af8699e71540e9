"""Classification of remote model failures into user-facing errors."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class GeminiErrorKind(str, Enum):
    RATE_LIMITED = "RATE_LIMITED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    BAD_REQUEST = "BAD_REQUEST"
    AUTH_ERROR = "AUTH_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class ClassifiedError:
    kind: GeminiErrorKind
    status_code: int
    message: str

    @property
    def code(self) -> str:
        return self.kind.value


ERROR_TABLE = {
    GeminiErrorKind.RATE_LIMITED: ClassifiedError(
        GeminiErrorKind.RATE_LIMITED, 429,
        "Limite de requisições da API Gemini atingido. Aguarde alguns segundos e tente novamente.",
    ),
    GeminiErrorKind.SERVICE_UNAVAILABLE: ClassifiedError(
        GeminiErrorKind.SERVICE_UNAVAILABLE, 503,
        "O serviço Gemini está temporariamente indisponível. Tente novamente em instantes.",
    ),
    GeminiErrorKind.BAD_REQUEST: ClassifiedError(
        GeminiErrorKind.BAD_REQUEST, 400,
        "A requisição foi bloqueada (possível filtro de segurança ou dados inválidos).",
    ),
    GeminiErrorKind.AUTH_ERROR: ClassifiedError(
        GeminiErrorKind.AUTH_ERROR, 403,
        "Erro de autenticação com a API Gemini. Verifique as credenciais do projeto.",
    ),
    GeminiErrorKind.INTERNAL_ERROR: ClassifiedError(
        GeminiErrorKind.INTERNAL_ERROR, 500,
        "Erro interno ao chamar a API Gemini. Tente novamente mais tarde.",
    ),
}

STATUS_ATTRIBUTES = ("code", "status_code", "http_status_code", "status")


def error_status(error: BaseException) -> Optional[int]:
    """First integer HTTP-like status found on the error, if any."""
    for attr in STATUS_ATTRIBUTES:
        value = getattr(error, attr, None)
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return value
        if isinstance(value, str) and value.isdigit():
            return int(value)
    return None


def classify_gemini_error(error: BaseException) -> ClassifiedError:
    """Map an upstream exception to exactly one error kind.

    Checks run in priority order: rate limit, unavailability, bad request
    (safety blocks included), authentication, then the internal fallback.
    """
    message = str(error) or error.__class__.__name__
    lowered = message.lower()
    status = error_status(error)

    if (status == 429 or "429" in message or "RESOURCE_EXHAUSTED" in message
            or "rate limit" in lowered or "quota" in lowered):
        return ERROR_TABLE[GeminiErrorKind.RATE_LIMITED]

    if status == 503 or "503" in message or "UNAVAILABLE" in message:
        return ERROR_TABLE[GeminiErrorKind.SERVICE_UNAVAILABLE]

    if status == 400 or "400" in message or "INVALID_ARGUMENT" in message or "SAFETY" in message:
        return ERROR_TABLE[GeminiErrorKind.BAD_REQUEST]

    if (status in (401, 403) or "401" in message or "403" in message
            or "PERMISSION_DENIED" in message or "UNAUTHENTICATED" in message):
        return ERROR_TABLE[GeminiErrorKind.AUTH_ERROR]

    return ERROR_TABLE[GeminiErrorKind.INTERNAL_ERROR]


def log_gemini_error(endpoint: str, error: BaseException, classified: ClassifiedError):
    logger.error(f"{endpoint} error [{classified.code}]: {error}")
