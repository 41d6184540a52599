import random
import re
from typing import Dict, List, Optional

from badgeshop.adapters.anthropic_chat import AnthropicChatAdapter
from badgeshop.adapters.openai_images import ImageProviderError, OpenAIImageAdapter
from badgeshop.utils.gradient import generate_gradient_data_url
from badgeshop.utils.log import get_logger

log = get_logger("images")

VISUAL_QUALITY = [
    "stunning high definition",
    "premium professional quality",
    "cinematic quality",
    "crisp high resolution",
    "artistic 4K quality",
    "beautifully detailed",
    "exquisite high-end",
]
STYLE_DESCRIPTORS = [
    "elegant abstract composition",
    "smooth sophisticated texture",
    "premium artistic backdrop",
    "clean modern design with perfect balance",
    "subtle harmonious pattern",
    "minimalist professional aesthetic",
    "soft focus artistic texture",
    "balanced visual composition",
]
FINISHING_TOUCHES = [
    "with perfect composition",
    "with balanced visual elements",
    "with sophisticated appearance",
    "with harmonious design elements",
    "with tasteful aesthetic",
    "with perfect visual balance",
]

# English and Spanish terms, customers write in both
COLOR_TERMS = [
    "blue", "red", "green", "yellow", "purple", "black", "white", "orange", "teal",
    "azul", "rojo", "verde", "amarillo", "morado", "negro", "blanco", "naranja",
]
STYLE_TERMS = [
    "abstract", "modern", "geometric", "minimalist", "professional", "corporate", "gradient",
    "abstracto", "moderno", "geométrico", "minimalista", "profesional", "corporativo", "degradado",
]
THEME_TERMS = [
    "business", "education", "healthcare", "technology", "nature", "creative",
    "negocio", "educación", "salud", "tecnología", "naturaleza", "creativo",
]

FALLBACK_SUGGESTIONS = [
    'Try specifying colors like "blue and teal professional gradient"',
    'Try adding a style like "modern corporate background with subtle patterns"',
    'Try describing a specific mood like "elegant professional backdrop with calm colors"',
]

_FALLBACK_COLOR_RE = re.compile(
    r"blue|red|green|yellow|purple|orange|teal|violet|pink|gray|black|white", re.IGNORECASE
)

TEMPLATE_COLORS = {
    "corporate": ("#0066cc", "#ffffff"),
    "business": ("#003366", "#ffffff"),
    "professional": ("#004d99", "#ffffff"),
    "school": ("#3366cc", "#ffffff"),
    "education": ("#6633cc", "#ffffff"),
    "conference": ("#ff7e5f", "#ffffff"),
    "event": ("#fd746c", "#ffffff"),
    "modern": ("#4776E6", "#ffffff"),
    "hospital": ("#11998e", "#ffffff"),
    "healthcare": ("#38ef7d", "#ffffff"),
    "security": ("#333333", "#ffffff"),
    "red": ("#cc0000", "#ffffff"),
    "blue": ("#0066cc", "#ffffff"),
    "green": ("#006633", "#ffffff"),
    "yellow": ("#ffcc00", "#333333"),
    "orange": ("#ff6600", "#ffffff"),
    "purple": ("#660099", "#ffffff"),
    "pink": ("#ff3399", "#ffffff"),
    "black": ("#333333", "#ffffff"),
    "dark": ("#222222", "#ffffff"),
    "light": ("#f5f5f5", "#333333"),
    "white": ("#ffffff", "#333333"),
}
DEFAULT_TEMPLATE_COLORS = ("#065388", "#ffffff")


class ImageServiceException(Exception):
    pass


def enhance_prompt_locally(prompt: str, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return (
        f"Generate a {rng.choice(VISUAL_QUALITY)} {rng.choice(STYLE_DESCRIPTORS)} "
        f"with {prompt.strip()} theme/colors {rng.choice(FINISHING_TOUCHES)}. "
        "The image should be clean, professional and suitable as a background. "
        "No text, no logos, no watermarks, no busy elements."
    )


def smart_suggestions(prompt: str) -> List[str]:
    lowered = prompt.lower()
    has_color = any(t in lowered for t in COLOR_TERMS)
    has_style = any(t in lowered for t in STYLE_TERMS)
    has_theme = any(t in lowered for t in THEME_TERMS)

    suggestions = []
    if not has_color:
        if any(t in lowered for t in ("corporate", "business", "professional")):
            suggestions.append(f'Try adding corporate colors: "{prompt} with blue and gray tones"')
        elif any(t in lowered for t in ("creative", "artistic")):
            suggestions.append(f'Try adding vibrant colors: "{prompt} with purple and teal gradient"')
        else:
            suggestions.append(f'Try adding colors: "{prompt} with elegant color palette"')
    if not has_style:
        suggestions.append(f'Try specifying a style: "{prompt} with modern abstract style"')
        suggestions.append(f'Try specifying a pattern: "{prompt} with subtle geometric elements"')
    if not (has_theme or has_color or has_style):
        suggestions.append(
            f'Try being more specific: "Professional {prompt} background with blue gradients and subtle patterns"'
        )
    suggestions.append(f'Enhanced version: "{prompt} with premium look, high quality background for credentials"')
    return suggestions


def template_background_type(prompt: str, rng: Optional[random.Random] = None) -> str:
    lowered = prompt.lower()
    if any(t in lowered for t in ("image", "photo", "picture")):
        return "image"
    if "gradient" in lowered:
        return "gradient"
    if "pattern" in lowered:
        return "pattern"
    return (rng or random).choice(["color", "gradient"])


def template_colors(prompt: str) -> Dict[str, str]:
    lowered = prompt.lower()
    for keyword, (background, text) in TEMPLATE_COLORS.items():
        if keyword in lowered:
            return {"background": background, "text": text}
    background, text = DEFAULT_TEMPLATE_COLORS
    return {"background": background, "text": text}


class ImageService:
    def __init__(self, chat: AnthropicChatAdapter, images: OpenAIImageAdapter):
        self.chat = chat
        self.images = images

    def gradient(self, prompt: str) -> Dict:
        return {"imageUrl": generate_gradient_data_url(prompt), "source": "custom-gradient", "type": "gradient"}

    def enhance_prompt(self, prompt: str) -> str:
        enhanced = self.chat.enhance_image_prompt(prompt)
        if enhanced:
            log.info("Prompt enhanced by the prompt model")
            return enhanced
        return enhance_prompt_locally(prompt)

    def generate(self, prompt: str, kind: str = "image") -> Dict:
        """
        Generate a badge background. AI failures never surface as errors:
        the caller gets an emergency gradient with isFallback set.
        """
        if not prompt:
            raise ImageServiceException("A prompt is required to generate the image or gradient")
        if kind == "gradient":
            return self.gradient(prompt)

        suggestions = smart_suggestions(prompt)
        enhanced = self.enhance_prompt(prompt)
        try:
            url, model = self.images.generate(enhanced)
        except ImageProviderError as e:
            log.error(f"Image generation failed, using emergency gradient: {e}")
            return self.emergency_gradient(prompt, str(e))

        log.info(f"Image generated with {model}")
        return {
            "imageUrl": url,
            "source": "dall-e",
            "model": model,
            "type": "image",
            "message": f"Image generated with OpenAI {model}",
            "suggestions": suggestions,
            "originalPrompt": prompt,
            "enhancedPrompt": enhanced,
        }

    def emergency_gradient(self, prompt: str, error: str) -> Dict:
        match = _FALLBACK_COLOR_RE.search(prompt or "")
        base = match.group(0).lower() if match else "blue"
        return {
            "imageUrl": generate_gradient_data_url(f"{base} professional gradient"),
            "source": "emergency-gradient",
            "type": "gradient",
            "isFallback": True,
            "baseColor": base,
            "message": "Image generation failed with the available APIs. Using a basic custom gradient.",
            "suggestions": list(FALLBACK_SUGGESTIONS),
            "error": error or "Image generation failed with the available APIs",
        }

    def template(self, prompt: str) -> Dict:
        if not prompt:
            raise ImageServiceException("A prompt is required to generate the template")
        data = {"backgroundType": template_background_type(prompt), "colors": template_colors(prompt)}
        if data["backgroundType"] == "image":
            data["imageUrl"] = generate_gradient_data_url(prompt)
        return data

    def test_connection(self, service: str) -> Dict:
        if service == "openai":
            return self.images.health_check()
        if service == "anthropic":
            return self.chat.health_check()
        raise ImageServiceException(f"Unknown service: {service}")
