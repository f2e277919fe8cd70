import logging
from typing import List, Optional

import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"
_SEND_TIMEOUT_SECONDS = 10.0
# Bot API limit for the text of one message
MAX_MESSAGE_LENGTH = 4096


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Split `text` into chunks of at most `limit` characters, on line boundaries where possible."""
    chunks: List[str] = []
    current = ""
    for line in text.split("\n"):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        candidate = f"{current}\n{line}" if current else line
        if current and len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current or not chunks:
        chunks.append(current)
    return chunks


class TelegramNotifier:
    """
    Posts plain-text alerts to one Telegram chat through the Bot API.

    Delivery is best effort: transport errors and non-2xx answers are logged
    and swallowed so that a flaky chat never stops the polling loop.
    """

    def __init__(
        self,
        token: Optional[str],
        chat_id: Optional[int],
        base_url: str = TELEGRAM_API_URL,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._token = token or ""
        self._chat_id = chat_id
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=_SEND_TIMEOUT_SECONDS)

    @property
    def configured(self) -> bool:
        return bool(self._token) and self._chat_id is not None

    def send(self, text: str) -> bool:
        """Send `text` to the chat; return True if Telegram accepted it."""
        if not self.configured:
            logger.warning("Telegram is not configured, dropping message: %s", text)
            return False

        url = f"{self._base_url}/bot{self._token}/sendMessage"
        for chunk in split_message(text):
            if not self._post(url, chunk):
                return False
        return True

    def _post(self, url: str, text: str) -> bool:
        try:
            response = self._client.post(url, json={"chat_id": self._chat_id, "text": text})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Telegram rejected message with status %s", exc.response.status_code
            )
            return False
        except (httpx.HTTPError, httpx.InvalidURL, RuntimeError) as exc:
            # str(exc) may include the request URL, which contains the token.
            # RuntimeError: the client was closed during shutdown.
            logger.warning("Failed to send Telegram message: %s", type(exc).__name__)
            return False

        return True

    def close(self) -> None:
        self._client.close()
