"""
LLM Completion Providers
========================

The pipeline depends on a single external capability: turning a
(system prompt, user prompt) pair into one text completion. Providers
wrap that call for each backend and translate every failure into
ProviderError.

Backends:
    - OpenAICompatibleProvider: OpenAI and Groq chat-completions over httpx
    - OllamaProvider: local models through langchain-ollama
"""

import time
from typing import Any, Protocol, runtime_checkable

import httpx
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_ollama import ChatOllama
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.config.pipeline import ProviderConfig
from src.utils.errors import ConfigurationError, ProviderError
from src.utils.logger import get_logger, preview

logger = get_logger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


@runtime_checkable
class CompletionProvider(Protocol):
    """
    Text-completion capability used by the extraction orchestrator.

    Implementations must raise ProviderError (and nothing else) for
    network failures, timeouts, non-2xx responses and empty completions.
    """

    name: str
    model: str

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str: ...


def _is_retryable(exc: BaseException) -> bool:
    """Retry transport failures, timeouts, 429 and 5xx responses."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return False


class OpenAICompatibleProvider:
    """
    Chat-completions client for OpenAI-compatible APIs (OpenAI, Groq).

    Example:
        provider = OpenAICompatibleProvider(config)
        text = await provider.complete(system, user, 0.1, 4000)
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            config: Provider connection settings
            transport: Optional httpx transport (used by tests)
        """
        if not config.api_key:
            raise ConfigurationError(
                message=f"Provider '{config.name}' requires an API key",
                details={"provider": config.name},
            )
        self._config = config
        self._transport = transport
        self.name = config.name
        self.model = config.model

    def _retrying(self) -> AsyncRetrying:
        delay = self._config.retry_delay
        return AsyncRetrying(
            stop=stop_after_attempt(max(1, self._config.max_retries)),
            wait=wait_exponential(multiplier=delay, min=delay, max=30),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        response = await client.post("/chat/completions", json=payload)
        response.raise_for_status()
        return response

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """
        Request one chat completion.

        Returns:
            Text of choices[0].message.content

        Raises:
            ProviderError: On any failure after retries
        """
        payload = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_output_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }

        logger.debug(
            "llm_provider.request",
            provider=self.name,
            model=self.model,
            prompt_chars=len(user_prompt),
            prompt_preview=preview(user_prompt),
        )
        start = time.perf_counter()

        try:
            async with httpx.AsyncClient(
                base_url=self._config.base_url,
                headers=headers,
                timeout=self._config.request_timeout,
                transport=self._transport,
            ) as client:
                async for attempt in self._retrying():
                    with attempt:
                        response = await self._post(client, payload)
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(
                "llm_provider.http_error",
                provider=self.name,
                status_code=status,
                body=e.response.text[:200],
            )
            raise ProviderError(
                message=f"{self.name} API returned HTTP {status}",
                details={"provider": self.name, "body": e.response.text[:500]},
                status_code=status,
            ) from e
        except httpx.TimeoutException as e:
            logger.error("llm_provider.timeout", provider=self.name, error=str(e))
            raise ProviderError(
                message=f"{self.name} API request timed out",
                details={"provider": self.name, "timeout": self._config.request_timeout},
            ) from e
        except httpx.HTTPError as e:
            logger.error("llm_provider.network_error", provider=self.name, error=str(e))
            raise ProviderError(
                message=f"{self.name} API request failed: {e}",
                details={"provider": self.name},
            ) from e

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ProviderError(
                message=f"Malformed completion response from {self.name}",
                details={"provider": self.name, "body": response.text[:500]},
                status_code=response.status_code,
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise ProviderError(
                message=f"Empty completion from {self.name}",
                details={"provider": self.name},
                status_code=response.status_code,
            )

        logger.debug(
            "llm_provider.response",
            provider=self.name,
            duration_seconds=round(time.perf_counter() - start, 3),
            response_chars=len(content),
            response_preview=preview(content),
        )
        return content


class OllamaProvider:
    """
    Local LLM provider backed by ChatOllama.

    Ollama runs in JSON mode so completions are a single JSON object.
    """

    def __init__(self, config: ProviderConfig, json_mode: bool = True) -> None:
        self._config = config
        self._json_mode = json_mode
        self.name = config.name
        self.model = config.model

    def _build_llm(self, temperature: float, max_output_tokens: int) -> ChatOllama:
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "base_url": self._config.base_url,
            "temperature": temperature,
            "num_predict": max_output_tokens,
            "client_kwargs": {"timeout": self._config.request_timeout},
        }
        if self._json_mode:
            kwargs["format"] = "json"
        return ChatOllama(**kwargs)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """
        Request one completion from Ollama.

        Raises:
            ProviderError: On any failure after retries
        """
        llm = self._build_llm(temperature, max_output_tokens)
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        delay = self._config.retry_delay
        start = time.perf_counter()

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max(1, self._config.max_retries)),
                wait=wait_exponential(multiplier=delay, min=delay, max=30),
                retry=retry_if_exception_type((ConnectionError, TimeoutError, httpx.TransportError)),
                reraise=True,
            ):
                with attempt:
                    response = await llm.ainvoke(messages)
        except Exception as e:
            logger.error("llm_provider.ollama_error", model=self.model, error=str(e))
            raise ProviderError(
                message=f"Ollama request failed: {e}",
                details={"provider": self.name, "model": self.model},
            ) from e

        content = response.content
        if not isinstance(content, str) or not content.strip():
            raise ProviderError(
                message="Empty completion from ollama",
                details={"provider": self.name, "model": self.model},
            )

        logger.debug(
            "llm_provider.response",
            provider=self.name,
            duration_seconds=round(time.perf_counter() - start, 3),
            response_chars=len(content),
            response_preview=preview(content),
        )
        return content


def create_provider(config: ProviderConfig) -> CompletionProvider:
    """
    Build the provider for a resolved configuration.

    Raises:
        ConfigurationError: If the provider is unknown or lacks credentials
    """
    if config.name in ("openai", "groq"):
        return OpenAICompatibleProvider(config)
    if config.name == "ollama":
        return OllamaProvider(config)
    raise ConfigurationError(
        message=f"Unknown AI provider: {config.name}",
        details={"provider": config.name},
    )
