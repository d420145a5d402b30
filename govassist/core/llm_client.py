"""Thin async wrappers over the language-model SDKs.

Both wrappers make exactly one call per request and convert SDK failures
into ``APIClientError`` / ``APITimeoutError``.
"""

import json
from typing import Any, Dict, List, Tuple

import openai
from huggingface_hub import AsyncInferenceClient, InferenceTimeoutError
from openai import AsyncOpenAI

from govassist.core.exceptions import APIClientError, APITimeoutError
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OpenAIChatClient:
    """Wrapper for OpenAI chat completions with forced tool calls."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        max_tokens: int = 200,
        temperature: float = 0.7,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            model: Chat model name
            max_tokens: Completion token limit
            temperature: Sampling temperature
        """
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = AsyncOpenAI(api_key=api_key)
        LOGGER.info(f"Initialized OpenAI client with model {self.model}")

    async def call_tool(
        self,
        messages: List[Dict[str, str]],
        tool: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Force the model to call ``tool`` and return its parsed arguments.

        Args:
            messages: Chat messages (system and user)
            tool: Function tool definition in OpenAI format

        Returns:
            Decoded JSON arguments of the tool call

        Raises:
            APITimeoutError: If the request times out
            APIClientError: If the request fails or the reply has no valid tool call
        """
        tool_name = tool["function"]["name"]
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=[tool],
                tool_choice={"type": "function", "function": {"name": tool_name}},
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except openai.APITimeoutError as e:
            LOGGER.warning(f"OpenAI request timed out: {e}")
            raise APITimeoutError("OpenAI request timed out", original_error=e) from e
        except openai.OpenAIError as e:
            LOGGER.warning(f"OpenAI request failed: {e}")
            raise APIClientError(f"OpenAI request failed: {e}", original_error=e) from e

        tool_calls = completion.choices[0].message.tool_calls if completion.choices else None
        if not tool_calls:
            raise APIClientError(f"OpenAI reply did not call {tool_name}")

        try:
            return json.loads(tool_calls[0].function.arguments or "{}")
        except json.JSONDecodeError as e:
            raise APIClientError("OpenAI returned malformed tool arguments", original_error=e) from e


class HuggingFaceClient:
    """Wrapper for the HuggingFace hosted inference API."""

    def __init__(self, api_key: str):
        self.client = AsyncInferenceClient(token=api_key)
        LOGGER.info("Initialized HuggingFace inference client")

    async def classify(self, text: str, labels: List[str], model: str) -> List[Tuple[str, float]]:
        """Zero-shot classification.

        Returns:
            (label, score) pairs, best first

        Raises:
            APITimeoutError: If the request times out
            APIClientError: If the request fails
        """
        try:
            result = await self.client.zero_shot_classification(
                text,
                candidate_labels=labels,
                model=model,
            )
        except InferenceTimeoutError as e:
            raise APITimeoutError("HuggingFace classification timed out", original_error=e) from e
        except Exception as e:
            raise APIClientError(f"HuggingFace classification failed: {e}", original_error=e) from e

        ranked = sorted(result, key=lambda item: item.score, reverse=True)
        return [(item.label, item.score) for item in ranked]

    async def generate(
        self,
        prompt: str,
        model: str,
        max_new_tokens: int = 150,
        temperature: float = 0.7,
    ) -> str:
        """Sampled text generation.

        Raises:
            APITimeoutError: If the request times out
            APIClientError: If the request fails
        """
        try:
            return await self.client.text_generation(
                prompt,
                model=model,
                max_new_tokens=max_new_tokens,
                temperature=temperature,
                do_sample=True,
            )
        except InferenceTimeoutError as e:
            raise APITimeoutError("HuggingFace generation timed out", original_error=e) from e
        except Exception as e:
            raise APIClientError(f"HuggingFace generation failed: {e}", original_error=e) from e
