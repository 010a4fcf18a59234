"""Ollama client wrapper for LLM interactions."""

import logging

import ollama

logger = logging.getLogger(__name__)


class OllamaClient:
    """Thin synchronous wrapper around ``ollama.Client``."""

    def __init__(
        self,
        model: str = "qwen2.5:7b",
        host: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize Ollama client.

        Args:
            model: Model name to use (default: qwen2.5:7b)
            host: Optional Ollama host URL (defaults to localhost:11434)
            timeout: Optional request timeout in seconds, enforced by the HTTP transport
        """
        self.model = model
        self.host = host
        self.timeout = timeout
        self._client = ollama.Client(host=host, timeout=timeout)

    def chat(
        self,
        messages: list[dict[str, str]],
        format_json: bool = False,
        temperature: float = 0.7,
    ) -> str:
        """
        Run one chat exchange.

        Args:
            messages: Role/content message dicts, oldest first
            format_json: Ask the server to constrain output to JSON
            temperature: Sampling temperature

        Returns:
            Content of the assistant reply (empty string if none)

        Raises:
            ollama.ResponseError: If the server rejects the request
            httpx.HTTPError: On connection failures or timeouts
        """
        prompt_chars = sum(len(message.get("content", "")) for message in messages)
        logger.info(f"[LLM REQUEST] model={self.model}, messages={len(messages)}, chars={prompt_chars}")
        if messages:
            logger.debug(f"[LLM PROMPT] {messages[-1].get('content', '')[:500]}")

        options = {"temperature": temperature}
        try:
            if format_json:
                response = self._client.chat(
                    model=self.model, messages=messages, options=options, format="json"
                )
            else:
                response = self._client.chat(model=self.model, messages=messages, options=options)
        except Exception as e:
            logger.error(f"Ollama chat request to {self.host or 'default host'} failed: {e}")
            raise

        content = response["message"]["content"] or ""
        logger.info(f"[LLM RESPONSE] {len(content)} chars")
        logger.debug(f"[LLM RESPONSE CONTENT] {content}")
        return content

    def generate_completion(
        self,
        prompt: str,
        system: str | None = None,
        format_json: bool = False,
        temperature: float = 0.7,
    ) -> str:
        """
        Complete a single prompt, optionally under a system instruction.

        Args:
            prompt: User prompt
            system: Optional system instruction sent before the prompt
            format_json: Ask the server to constrain output to JSON
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        return self.chat(messages, format_json=format_json, temperature=temperature)

    def is_available(self) -> bool:
        """Check whether the Ollama server answers."""
        try:
            self._client.list()
        except Exception as e:
            logger.warning(f"Ollama service not available: {e}")
            return False
        return True
