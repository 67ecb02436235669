"""
LLM Provider Implementations

Adapters from the oracle's chat interface to vendor SDKs:
- OpenAI, plus the OpenAI-compatible Hyperbolic, Gaia and Grok endpoints
- Anthropic
- Google Gemini
- Mock (for testing)

SDK clients are created on first use and never retry on their own; the
oracle reports a failed call instead of retrying it.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .client import LLMResponse
from .determinism import DecodingPolicy, policy_to_provider_args


class LLMProvider(ABC):
    """A chat backend with a fixed model."""

    name: str = ""

    @property
    @abstractmethod
    def model(self) -> str:
        ...

    @abstractmethod
    def chat(self, messages: list[dict[str, Any]], *, policy: DecodingPolicy) -> LLMResponse:
        """
        Send one chat completion request.

        Args:
            messages: Message dicts with 'role' and 'content'
            policy: Decoding policy

        Returns:
            LLMResponse with the reply text and token usage
        """
        ...


class _SDKProvider(LLMProvider):
    """Holds credentials and lazily builds the vendor client."""

    env_key: str = ""
    default_model: str = ""

    def __init__(
        self,
        model: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        proxy: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._model = model or self.default_model
        self._api_key = api_key or (os.getenv(self.env_key) if self.env_key else None)
        self._proxy = proxy
        self._timeout = timeout
        self._client: Any = None

    @property
    def model(self) -> str:
        return self._model

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    @abstractmethod
    def _build_client(self) -> Any:
        ...

    def _http_client(self) -> Any:
        if not self._proxy:
            return None
        import httpx
        return httpx.Client(proxy=self._proxy)


class OpenAIProvider(_SDKProvider):
    """OpenAI chat completions; also the base of every compatible endpoint."""

    name = "openai"
    env_key = "OPENAI_API_KEY"
    default_model = "gpt-4o"
    default_base_url: Optional[str] = None

    def __init__(self, model: Optional[str] = None, *, base_url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(model, **kwargs)
        self._base_url = base_url or self.default_base_url

    def _build_client(self) -> Any:
        from openai import OpenAI

        kwargs: dict[str, Any] = {"api_key": self._api_key, "max_retries": 0}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        if self._timeout:
            kwargs["timeout"] = self._timeout
        http_client = self._http_client()
        if http_client is not None:
            kwargs["http_client"] = http_client
        return OpenAI(**kwargs)

    def chat(self, messages: list[dict[str, Any]], *, policy: DecodingPolicy) -> LLMResponse:
        kwargs = policy_to_provider_args(policy, "openai")
        if policy.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(model=self._model, messages=messages, **kwargs)

        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model or self._model,
            provider=self.name,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            finish_reason=choice.finish_reason or "stop",
        )


class HyperbolicProvider(OpenAIProvider):
    """Hyperbolic inference API, the performer's default backend."""

    name = "hyperbolic"
    env_key = "HYPERBOLIC_API_KEY"
    default_model = "deepseek-ai/DeepSeek-V3"
    default_base_url = "https://api.hyperbolic.xyz/v1"


class GaiaProvider(OpenAIProvider):
    """Gaia node endpoint, the validator's default backend."""

    name = "gaia"
    env_key = "GAIA_API_KEY"
    default_model = "llama"
    default_base_url = "https://llama3b.gaia.domains/v1"


class GrokProvider(OpenAIProvider):
    name = "grok"
    env_key = "XAI_API_KEY"
    default_model = "grok-4-latest"
    default_base_url = "https://api.x.ai/v1"


class AnthropicProvider(_SDKProvider):
    name = "anthropic"
    env_key = "ANTHROPIC_API_KEY"
    default_model = "claude-sonnet-4-20250514"

    def _build_client(self) -> Any:
        from anthropic import Anthropic

        kwargs: dict[str, Any] = {"api_key": self._api_key, "max_retries": 0}
        if self._timeout:
            kwargs["timeout"] = self._timeout
        http_client = self._http_client()
        if http_client is not None:
            kwargs["http_client"] = http_client
        return Anthropic(**kwargs)

    def chat(self, messages: list[dict[str, Any]], *, policy: DecodingPolicy) -> LLMResponse:
        # Anthropic takes the system prompt as a separate argument
        system = "\n".join(m["content"] for m in messages if m["role"] == "system")
        kwargs = policy_to_provider_args(policy, "anthropic")
        if system:
            kwargs["system"] = system

        response = self.client.messages.create(
            model=self._model,
            messages=[m for m in messages if m["role"] != "system"],
            **kwargs,
        )

        text = "".join(getattr(block, "text", "") for block in response.content)
        usage = response.usage
        return LLMResponse(
            content=text,
            model=response.model or self._model,
            provider=self.name,
            input_tokens=usage.input_tokens if usage else 0,
            output_tokens=usage.output_tokens if usage else 0,
            finish_reason=response.stop_reason or "stop",
        )


class GoogleProvider(_SDKProvider):
    name = "google"
    env_key = "GOOGLE_API_KEY"
    default_model = "gemini-2.5-flash"

    def _build_client(self) -> Any:
        from google import genai
        from google.genai import types

        kwargs: dict[str, Any] = {"api_key": self._api_key}
        if self._timeout:
            # milliseconds
            kwargs["http_options"] = types.HttpOptions(timeout=int(self._timeout * 1000))
        return genai.Client(**kwargs)

    def chat(self, messages: list[dict[str, Any]], *, policy: DecodingPolicy) -> LLMResponse:
        from google.genai import types

        config_kwargs = policy_to_provider_args(policy, "google")
        system = "\n".join(m["content"] for m in messages if m["role"] == "system")
        if system:
            config_kwargs["system_instruction"] = system
        if policy.json_mode:
            config_kwargs["response_mime_type"] = "application/json"

        contents = [
            types.Content(
                role="user" if m["role"] == "user" else "model",
                parts=[types.Part(text=m["content"])],
            )
            for m in messages
            if m["role"] != "system"
        ]
        client = self.client
        response = client.models.generate_content(
            model=self._model,
            contents=contents,
            config=types.GenerateContentConfig(**config_kwargs),
        )

        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=response.text or "",
            model=self._model,
            provider=self.name,
            input_tokens=getattr(usage, "prompt_token_count", 0) or 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) or 0,
        )


class MockProvider(LLMProvider):
    """
    Scripted provider for tests.

    Replies come from ``response_fn`` when given, otherwise from
    ``responses`` in rotation, otherwise "no". ``error`` (or ``set_error``)
    makes every call raise instead. Calls are recorded in ``calls``.
    """

    name = "mock"

    def __init__(
        self,
        model: str = "mock-model",
        *,
        responses: Optional[list[str]] = None,
        response_fn: Optional[Callable[[list[dict[str, Any]], DecodingPolicy], str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self._model = model
        self._responses = list(responses or [])
        self._response_fn = response_fn
        self._error = error
        self.calls: list[dict[str, Any]] = []

    @property
    def model(self) -> str:
        return self._model

    def set_error(self, error: Optional[Exception]) -> None:
        self._error = error

    def chat(self, messages: list[dict[str, Any]], *, policy: DecodingPolicy) -> LLMResponse:
        self.calls.append({"messages": messages, "policy": policy})
        if self._error is not None:
            raise self._error

        if self._response_fn is not None:
            content = self._response_fn(messages, policy)
        elif self._responses:
            content = self._responses[(len(self.calls) - 1) % len(self._responses)]
        else:
            content = "no"

        return LLMResponse(content=content, model=self._model, provider=self.name)


PROVIDERS: dict[str, type[_SDKProvider]] = {
    cls.name: cls
    for cls in (OpenAIProvider, HyperbolicProvider, GaiaProvider, GrokProvider, AnthropicProvider, GoogleProvider)
}

# Environment variable holding each provider's API key
PROVIDER_ENV_KEYS: dict[str, str] = {name: cls.env_key for name, cls in PROVIDERS.items()}


def create_provider(
    provider_name: str,
    model: Optional[str] = None,
    proxy: Optional[str] = None,
    **kwargs: Any,
) -> LLMProvider:
    """
    Build a provider by name.

    ``base_url`` is honoured by OpenAI-compatible providers only. The mock
    provider accepts ``responses``, ``response_fn`` and ``error``.

    Raises:
        ValueError: If the provider name is unknown
    """
    provider_name = provider_name.lower()

    if provider_name == "mock":
        mock_kwargs = {k: v for k, v in kwargs.items() if k in ("responses", "response_fn", "error")}
        return MockProvider(model=model or "mock-model", **mock_kwargs)

    cls = PROVIDERS.get(provider_name)
    if cls is None:
        raise ValueError(f"Unknown provider: {provider_name}")
    if not issubclass(cls, OpenAIProvider):
        kwargs.pop("base_url", None)
    if cls is GoogleProvider:
        # genai has no proxy option
        proxy = None
    return cls(model, proxy=proxy, **kwargs)
