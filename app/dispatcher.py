"""Processamento de uma requisição: método -> corpo JSON -> rota -> filtro -> texto -> Telegram.

Cada requisição termina em um DispatchResult com status HTTP e texto de resposta.
O registro de rotas é só leitura, então o dispatcher não guarda estado entre
requisições.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import MAX_FLATTEN_DEPTH, RESPONSE_TEXTS, SURFACE_DELIVERY_FAILURES
from .filters import missing_fields, select_fields
from .flattener import TooDeepError, flatten
from .routes import KIND_HEARTCHECK

logger = logging.getLogger(__name__)

OUTCOME_DELIVERED = "delivered"
OUTCOME_HEARTCHECK = "heartcheck"
OUTCOME_BAD_METHOD = "rejected_bad_method"
OUTCOME_BAD_BODY = "rejected_bad_body"
OUTCOME_UNKNOWN_ROUTE = "rejected_unknown_route"
OUTCOME_TOO_DEEP = "rejected_too_deep"
OUTCOME_DELIVERY_FAILED = "delivery_failed"


class BadBodyError(ValueError):
    pass


@dataclass(frozen=True)
class DispatchResult:
    outcome: str
    status: int
    text: str
    message: Optional[str] = None


def _reject_constant(name):
    raise ValueError(f"non-standard JSON constant {name}")


def decode_json_object(body: bytes, max_depth: int = MAX_FLATTEN_DEPTH) -> Dict[str, Any]:
    """Decodifica o corpo como objeto JSON, preservando a ordem das chaves.

    NaN/Infinity são recusados; aninhamento que estoura a pilha do parser vira TooDeepError.
    """
    try:
        text = body.decode("utf-8") if isinstance(body, (bytes, bytearray)) else body
        data = json.loads(text, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise TooDeepError(None, max_depth) from exc
    except (UnicodeDecodeError, ValueError) as exc:
        raise BadBodyError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise BadBodyError(f"expected JSON object, got {type(data).__name__}")
    return data


class RequestDispatcher:
    def __init__(self, registry, sink, max_depth=MAX_FLATTEN_DEPTH,
                 surface_delivery_failures=SURFACE_DELIVERY_FAILURES):
        self.registry = registry
        self.sink = sink
        self.max_depth = max_depth
        self.surface_delivery_failures = surface_delivery_failures

    def _reject(self, outcome, status, text_key, path, detail=""):
        logger.warning(f"{status} {outcome} path={path} {detail}".rstrip())
        return DispatchResult(outcome, status, RESPONSE_TEXTS[text_key])

    def dispatch(self, path: str, method: str, body: bytes) -> DispatchResult:
        entry = self.registry.get(path)
        if entry is None:
            return self._reject(OUTCOME_UNKNOWN_ROUTE, 404, "not_found", path, f"method={method}")

        if entry.kind == KIND_HEARTCHECK:
            if method != "GET":
                return self._reject(OUTCOME_BAD_METHOD, 405, "bad_method", path, f"method={method}")
            return DispatchResult(OUTCOME_HEARTCHECK, 200, entry.confirmation)

        if method != "POST":
            return self._reject(OUTCOME_BAD_METHOD, 405, "bad_method", path, f"method={method}")

        try:
            data = decode_json_object(body, self.max_depth)
        except TooDeepError as exc:
            return self._reject(OUTCOME_TOO_DEEP, 400, "too_deep", path, str(exc))
        except BadBodyError as exc:
            return self._reject(OUTCOME_BAD_BODY, 400, "bad_body", path, str(exc))

        logger.debug(f"Received data on {path}: {data}")
        selected = select_fields(data, entry.filter_keys)
        if entry.is_filtered:
            absent = missing_fields(data, entry.filter_keys)
            if absent:
                logger.debug(f"Chaves de filtro ausentes em {path}: {list(absent)}")

        try:
            message = flatten(selected, self.max_depth)
        except TooDeepError as exc:
            return self._reject(OUTCOME_TOO_DEEP, 400, "too_deep", path, str(exc))

        result = self.sink.send_message(entry.key, message)
        if result.failed and self.surface_delivery_failures:
            return DispatchResult(OUTCOME_DELIVERY_FAILED, 502, RESPONSE_TEXTS["delivery_failed"], message)

        return DispatchResult(OUTCOME_DELIVERED, 200, entry.confirmation, message)
