"""
LLM runtime abstraction for the test case generator.

Provides a unified interface over OpenAI and OpenAI-compatible servers
(local mlx-llm-server, vLLM, Ollama's /v1 endpoint). Runtimes are built
from an explicit GeneratorConfig; there is no shared client.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, Protocol
import requests
from openai import OpenAI, OpenAIError
import logging

from .config import GeneratorConfig
from .exceptions import LLMRuntimeError, ConfigurationError

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"


class LLMRuntime(Protocol):
    """Protocol for all LLM runtime implementations."""

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 4000,
        temperature: Optional[float] = None,
        **kwargs
    ) -> str:
        """Generate text response from prompt."""
        ...

    def is_available(self) -> bool:
        """Check if this runtime is currently available."""
        ...

    def get_model_info(self) -> Dict[str, Any]:
        """Get information about the current model."""
        ...


class OpenAICompatibleRuntime:
    """
    Chat completion runtime for OpenAI-compatible APIs.
    Works with OpenAI itself and with local servers exposing /v1.
    """

    def __init__(
        self,
        base_url: str = OPENAI_BASE_URL,
        api_key: str = "no-key",
        model: str = "gpt-4o",
        name: str = "openai",
        timeout: float = 300.0
    ):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.model = model
        self.name = name
        self.timeout = timeout
        self.client = OpenAI(base_url=self.base_url, api_key=api_key, timeout=timeout)

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 4000,
        temperature: Optional[float] = None,
        **kwargs
    ) -> str:
        """Generate response using the chat completions API."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        if temperature is not None:
            kwargs["temperature"] = temperature

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                **kwargs
            )
        except OpenAIError as e:
            raise LLMRuntimeError(f"Failed to generate response from {self.name}: {e}") from e

        if not response.choices:
            raise LLMRuntimeError(f"{self.name} returned no choices")

        content = response.choices[0].message.content
        return (content or "").strip()

    def is_available(self) -> bool:
        """Check if the service is reachable and accepts the credentials."""
        try:
            response = requests.get(
                f"{self.base_url}/models",
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=5
            )
            return response.status_code == 200
        except requests.RequestException as e:
            logger.debug(f"Availability check against {self.base_url} failed: {e}")
            return False

    def get_model_info(self) -> Dict[str, Any]:
        """Get model information."""
        return {
            "name": self.name,
            "model": self.model,
            "base_url": self.base_url,
            "type": "openai-compatible"
        }


class MockLLMRuntime:
    """Mock runtime for testing - returns predefined responses."""

    def __init__(self, responses: Dict[str, str], default: str = ""):
        """
        Args:
            responses: Map from prompt keywords to mock responses
            default: Response when no keyword matches
        """
        self.responses = responses
        self.default = default
        self.call_count = 0
        self.last_prompt = ""
        self.last_system_prompt: Optional[str] = None
        self.last_max_tokens: Optional[int] = None

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: int = 4000,
        temperature: Optional[float] = None,
        **kwargs
    ) -> str:
        """Return mock response based on prompt content."""
        self.call_count += 1
        self.last_prompt = prompt
        self.last_system_prompt = system_prompt
        self.last_max_tokens = max_tokens

        for keyword, response in self.responses.items():
            if keyword.lower() in prompt.lower():
                return response

        return self.default

    def is_available(self) -> bool:
        return True

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "name": "mock",
            "type": "mock",
            "responses_count": len(self.responses)
        }


def create_runtime(config: GeneratorConfig) -> LLMRuntime:
    """
    Create a runtime from configuration.

    A custom base_url means a local or self-hosted server, where a missing
    API key is allowed. The hosted OpenAI API requires one.
    """
    base_url = config.base_url or OPENAI_BASE_URL
    is_hosted = base_url.rstrip('/') == OPENAI_BASE_URL

    if is_hosted and not config.api_key:
        raise ConfigurationError(
            "OpenAI API key is required. Set OPENAI_API_KEY or pass --api-key."
        )

    runtime = OpenAICompatibleRuntime(
        base_url=base_url,
        api_key=config.api_key or "no-key",
        model=config.model,
        name="openai" if is_hosted else "openai-compatible",
        timeout=config.timeout_seconds
    )
    logger.info(f"Using runtime: {runtime.name} (model: {runtime.model})")
    return runtime
