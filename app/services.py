import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .constants import (
    TG_API_BASE_URL,
    TG_API_TOKEN,
    TG_CHAT_ID,
    TG_MAX_MESSAGE_LENGTH,
    TG_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n... (truncated)"


@dataclass(frozen=True)
class DeliveryResult:
    delivered: bool
    reason: str
    status_code: Optional[int] = None

    @property
    def failed(self) -> bool:
        # entrega pulada por falta de credencial ou mensagem vazia não é falha
        return not self.delivered and self.reason not in ("missing_credentials", "empty_message")


def truncate_message(text: str, max_length: int) -> str:
    if max_length <= 0 or len(text) <= max_length:
        return text
    if max_length <= len(TRUNCATION_MARKER):
        return text[:max_length]
    return text[: max_length - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


class TelegramClient:
    """Envia mensagens de texto para um chat via Bot API (sendMessage).

    Uma tentativa por mensagem, sem retry. Falhas viram DeliveryResult e são
    registradas no log; nunca sobem para quem chamou.
    """

    def __init__(self, token: Optional[str] = TG_API_TOKEN, chat_id: Optional[str] = TG_CHAT_ID,
                 base_url: str = TG_API_BASE_URL, timeout: float = TG_TIMEOUT_SECONDS,
                 max_length: int = TG_MAX_MESSAGE_LENGTH):
        self.token = token
        self.chat_id = chat_id
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.max_length = max_length

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.chat_id)

    def _api_url(self) -> str:
        return f"{self.base_url}/bot{self.token}/sendMessage"

    def send_message(self, route_key: str, text: str) -> DeliveryResult:
        if not self.enabled:
            logger.warning("Telegram API token or chat ID is missing.")
            return DeliveryResult(False, "missing_credentials")

        if not text:
            logger.info(f"Mensagem vazia para path {route_key}; nada a enviar")
            return DeliveryResult(False, "empty_message")

        payload = {"chat_id": self.chat_id, "text": truncate_message(text, self.max_length)}
        try:
            resp = requests.post(self._api_url(), json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            # a URL da API contém o token
            detail = str(exc).replace(self.token, "***")
            logger.error(f"Failed to send message to Telegram for path {route_key}: {detail}")
            return DeliveryResult(False, "transport_error")

        if resp.status_code != 200:
            logger.error(
                f"Failed to send message to Telegram for path {route_key}. "
                f"Status code: {resp.status_code}\nResponse Body: {resp.text}"
            )
            return DeliveryResult(False, f"http_{resp.status_code}", resp.status_code)

        logger.info(f"Message sent to Telegram for path: {route_key}")
        return DeliveryResult(True, "sent", resp.status_code)
