from typing import Dict, Optional

import anthropic

from badgeshop.config import settings
from badgeshop.utils.log import get_logger

log = get_logger("anthropic_chat")


class ChatProviderError(Exception):
    """Raised when the text-generation call fails; carries the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ChatNotConfigured(ChatProviderError):
    def __init__(self):
        super().__init__("API configuration error. Please contact the administrator.", 500)


class AnthropicChatAdapter:
    """
    Thin wrapper over the Anthropic Messages API.
    SDK errors are translated into ChatProviderError so callers never import the SDK.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        chat_model: Optional[str] = None,
        prompt_model: Optional[str] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.chat_model = chat_model or settings.ANTHROPIC_CHAT_MODEL
        self.prompt_model = prompt_model or settings.ANTHROPIC_PROMPT_MODEL
        self._client = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> anthropic.Anthropic:
        if not self.configured:
            raise ChatNotConfigured()
        if self._client is None:
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def complete(
        self,
        system: str,
        message: str,
        max_tokens: int = 800,
        temperature: float = 0.7,
        model: Optional[str] = None,
    ) -> str:
        """
        Send one user message with a system prompt and return the reply text.

        Raises:
            ChatNotConfigured: no API key is set.
            ChatProviderError: the API rejected or failed the call.
        """
        client = self._get_client()
        try:
            response = client.messages.create(
                model=model or self.chat_model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": message}],
            )
        except anthropic.AuthenticationError as e:
            raise ChatProviderError(
                "API authentication failed. Please check the API key configuration.", 401
            ) from e
        except anthropic.RateLimitError as e:
            raise ChatProviderError("Rate limit exceeded. Please try again in a moment.", 429) from e
        except anthropic.BadRequestError as e:
            raise ChatProviderError("Invalid request format. Please try a different query.", 400) from e
        except anthropic.APIStatusError as e:
            raise ChatProviderError(f"API Error: {e.status_code} - {e.message}", e.status_code) from e
        except anthropic.APIError as e:
            log.error(f"Anthropic call failed: {e}")
            raise ChatProviderError("Error processing your request. Please try again later.", 500) from e

        text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
        log.info(f"Claude response received ({len(text)} chars)")
        return text

    def enhance_image_prompt(self, prompt: str) -> Optional[str]:
        """Ask the prompt model for a richer DALL·E prompt; None when unavailable or failing."""
        if not self.configured:
            log.info("No Anthropic API key, skipping prompt enhancement")
            return None
        try:
            text = self.complete(
                system=(
                    "You are a world-class image creation expert. Your task is to improve the user's prompt "
                    "to generate a high-quality background image with OpenAI DALL-E. Enhance the prompt to be "
                    "very detailed about style, colors, and mood. Focus on creating beautiful backgrounds "
                    "without text, logos, or busy elements. Reply ONLY with the improved prompt, nothing else."
                ),
                message=f'Please improve this background image prompt for DALL-E: "{prompt}"',
                max_tokens=1000,
                temperature=1.0,
                model=self.prompt_model,
            )
        except ChatProviderError as e:
            log.warning(f"Prompt enhancement failed: {e}")
            return None
        return text.strip() or None

    def health_check(self) -> Dict:
        if not self.configured:
            return {"success": False, "error": "API key not found"}
        try:
            text = self.complete(
                system="You are a helpful assistant.", message="Say hello", max_tokens=10
            )
        except ChatProviderError as e:
            return {"success": False, "error": f"API call failed: {e}", "status": e.status_code}
        return {"success": True, "message": "Connection successful", "response": text[:20] + "..."}


def get_chat_adapter() -> AnthropicChatAdapter:
    return AnthropicChatAdapter()
