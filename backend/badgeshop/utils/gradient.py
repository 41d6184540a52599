import base64
import re
from typing import List

COLOR_HEX = {
    "blue": "#0066cc",
    "red": "#cc0000",
    "green": "#006633",
    "yellow": "#ffcc00",
    "purple": "#660099",
    "orange": "#ff6600",
    "teal": "#008080",
    "violet": "#8a2be2",
    "pink": "#ff3399",
    "gray": "#808080",
    "grey": "#808080",
    "black": "#222222",
    "white": "#f5f5f5",
    "gold": "#d4af37",
    "navy": "#003366",
}

# second stop used when the prompt names a single color
_COMPANION = {
    "blue": "#66b2ff",
    "red": "#ff7e7e",
    "green": "#38ef7d",
    "yellow": "#fff3b0",
    "purple": "#b266ff",
    "orange": "#ffb27e",
    "teal": "#7fe0e0",
    "violet": "#d1a3ff",
    "pink": "#ffb3d9",
    "gray": "#e0e0e0",
    "grey": "#e0e0e0",
    "black": "#555555",
    "white": "#d9d9d9",
    "gold": "#fff1b8",
    "navy": "#336699",
}

DEFAULT_COLOR = "blue"

_WORD_RE = re.compile(r"[a-z]+")


def colors_in(prompt: str) -> List[str]:
    """Color words of the prompt in order of appearance, without repeats."""
    seen: List[str] = []
    for word in _WORD_RE.findall((prompt or "").lower()):
        if word in COLOR_HEX and word not in seen:
            seen.append(word)
    return seen


def gradient_stops(prompt: str) -> List[str]:
    names = colors_in(prompt) or [DEFAULT_COLOR]
    if len(names) == 1:
        return [COLOR_HEX[names[0]], _COMPANION[names[0]]]
    return [COLOR_HEX[n] for n in names[:3]]


def gradient_svg(prompt: str, width: int = 1024, height: int = 1024) -> str:
    stops = gradient_stops(prompt)
    last = len(stops) - 1
    stop_tags = "".join(
        f'<stop offset="{round(i * 100 / last)}%" stop-color="{c}"/>' for i, c in enumerate(stops)
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<defs><linearGradient id="g" x1="0%" y1="0%" x2="100%" y2="100%">{stop_tags}</linearGradient></defs>'
        f'<rect width="100%" height="100%" fill="url(#g)"/>'
        "</svg>"
    )


def generate_gradient_data_url(prompt: str) -> str:
    encoded = base64.b64encode(gradient_svg(prompt).encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"
