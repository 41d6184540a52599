from typing import Dict, List, Optional, Tuple

from openai import APIStatusError, OpenAI, OpenAIError

from badgeshop.config import settings
from badgeshop.utils.log import get_logger

log = get_logger("openai_images")


class ImageProviderError(Exception):
    pass


class OpenAIImageAdapter:
    """
    DALL·E image generation. Models are tried in order; the first URL wins.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        models: Optional[List[str]] = None,
        timeout_seconds: Optional[int] = None,
    ):
        self.api_key = (api_key if api_key is not None else settings.OPENAI_API_KEY).strip()
        self.models = models or list(settings.OPENAI_IMAGE_MODELS)
        self.timeout = timeout_seconds or settings.OPENAI_TIMEOUT_SECONDS

    def validate_key(self):
        if not self.api_key:
            raise ImageProviderError("OpenAI API key not available")
        # both personal (sk-...) and project (sk-proj-...) keys share the prefix
        if not self.api_key.startswith("sk-"):
            raise ImageProviderError("Invalid OpenAI API key - wrong format")

    def _client(self, timeout: Optional[int] = None, max_retries: int = 2) -> OpenAI:
        self.validate_key()
        return OpenAI(api_key=self.api_key, timeout=timeout or self.timeout, max_retries=max_retries)

    def generate(self, prompt: str) -> Tuple[str, str]:
        """
        Returns (image_url, model_used).

        Raises:
            ImageProviderError: bad key, or every configured model failed.
        """
        client = self._client()
        for model in self.models:
            kwargs = {"model": model, "prompt": prompt, "n": 1, "size": "1024x1024", "response_format": "url"}
            if model == "dall-e-3":
                kwargs.update(quality="hd", style="natural")
            try:
                log.info(f"Generating image with {model}...")
                response = client.images.generate(**kwargs)
            except APIStatusError as e:
                if e.status_code == 429:
                    log.error(f"{model}: rate limit exceeded")
                elif e.status_code == 401:
                    log.error(f"{model}: authentication error, check the API key")
                else:
                    log.error(f"{model}: {e.status_code} {e.message}")
                continue
            except OpenAIError as e:
                log.error(f"{model}: {e}")
                continue
            data = getattr(response, "data", None) or []
            if data and getattr(data[0], "url", None):
                return data[0].url, model
            log.warning(f"Response from {model} has no image URL")
        raise ImageProviderError("Could not generate the image with any OpenAI model")

    def health_check(self) -> Dict:
        try:
            client = self._client(timeout=5, max_retries=0)
        except ImageProviderError as e:
            tip = (
                "Make sure you have set OPENAI_API_KEY in your .env file"
                if not self.api_key
                else "API key must start with 'sk-'."
            )
            return {"success": False, "error": str(e), "tip": tip}
        try:
            models = list(client.models.list().data)
        except APIStatusError as e:
            return {"success": False, "error": f"API call failed: {e.message}", "status": e.status_code}
        except OpenAIError as e:
            return {"success": False, "error": f"API call failed: {e}"}
        ids = [m.id for m in models]
        return {
            "success": True,
            "message": "Connection successful",
            "modelCount": len(ids),
            "hasDallE": any(i in ("dall-e-3", "dall-e-2") for i in ids),
            "models": ids[:5],
        }


def get_image_adapter() -> OpenAIImageAdapter:
    return OpenAIImageAdapter()
