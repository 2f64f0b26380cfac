"""Ollama vision-language model client for camera frame queries."""
import json
import logging
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

import httpx

from ...core.config import get_settings
from ...core.exceptions import UpstreamConnectionError, VisionServiceError
from ..http_client_factory import get_shared_http_client

logger = logging.getLogger(__name__)


@dataclass
class VisionChunk:
    """One streamed piece of a generation. The final chunk has done=True and usage counts."""
    text: str
    done: bool = False
    prompt_eval_count: Optional[int] = None
    eval_count: Optional[int] = None

    @property
    def total_tokens(self) -> Optional[int]:
        if self.prompt_eval_count is None and self.eval_count is None:
            return None
        return (self.prompt_eval_count or 0) + (self.eval_count or 0)


def normalize_host(host: str) -> str:
    """Accept "localhost:11434" as well as "http://localhost:11434/"."""
    host = host.strip().rstrip("/")
    if "://" not in host:
        host = f"http://{host}"
    return host


class OllamaVisionService:
    """
    Streams generations from Ollama's /api/generate endpoint.

    Images are passed as raw base64 strings (no data: prefix), as Ollama expects.
    Host and model come from the settings store per call, so changes made
    through the settings API apply to the next query.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        settings = get_settings()
        self._client = client
        self.temperature = settings.ollama_temperature
        self.num_predict = settings.ollama_num_predict

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = get_shared_http_client()
        return self._client

    def build_payload(
        self,
        model: str,
        prompt: str,
        images: List[str],
        json_format: bool = True,
    ) -> dict:
        payload = {
            "model": model,
            "prompt": prompt,
            "images": images,
            "stream": True,
            "options": {"temperature": self.temperature, "num_predict": self.num_predict},
        }
        if json_format:
            payload["format"] = "json"
        return payload

    async def generate_stream(
        self,
        host: str,
        model: str,
        prompt: str,
        images: List[str],
        json_format: bool = True,
    ) -> AsyncIterator[VisionChunk]:
        """
        Stream a generation as VisionChunk objects.

        Raises:
            UpstreamConnectionError: Ollama host unreachable / timed out
            VisionServiceError: Ollama returned an error status or error line
        """
        url = f"{normalize_host(host)}/api/generate"
        payload = self.build_payload(model, prompt, images, json_format)

        logger.debug("Calling Ollama %s with model %s (%d image(s))", url, model, len(images))
        try:
            async with self.client.stream("POST", url, json=payload) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="ignore")
                    logger.error("HTTP error from Ollama: %s - %s", response.status_code, body)
                    raise VisionServiceError(
                        f"Ollama returned {response.status_code}: {body}",
                        user_message=f"Vision model error: {self._error_text(body) or response.status_code}",
                    )

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning("Skipping malformed Ollama line: %s", line[:200])
                        continue
                    if data.get("error"):
                        raise VisionServiceError(
                            f"Ollama error: {data['error']}",
                            user_message=f"Vision model error: {data['error']}",
                        )
                    yield VisionChunk(
                        text=data.get("response", ""),
                        done=bool(data.get("done")),
                        prompt_eval_count=data.get("prompt_eval_count"),
                        eval_count=data.get("eval_count"),
                    )
        except httpx.TimeoutException as e:
            logger.error("Timeout while calling Ollama at %s", url)
            raise UpstreamConnectionError(
                f"Timeout calling Ollama at {url}",
                user_message="Vision model request timed out.",
            ) from e
        except httpx.TransportError as e:
            logger.error("Could not reach Ollama at %s: %s", url, e)
            raise UpstreamConnectionError(
                f"Could not reach Ollama at {url}: {e}",
                user_message=f"Could not reach Ollama host {host}.",
            ) from e

    @staticmethod
    def _error_text(body: str) -> Optional[str]:
        try:
            return json.loads(body).get("error")
        except (json.JSONDecodeError, AttributeError):
            return body.strip() or None
