"""
Catálogo de estilos artísticos

Registro estático e inmutable que asocia cada estilo con su título y con el
prompt que se envía al servicio de generación.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class ArtStyle(str, Enum):
    CYBERPUNK_NEON = "cyberpunk-neon"
    VINTAGE_SEPIA = "vintage-sepia"
    WHIMSICAL_WATERCOLOR = "whimsical-watercolor"
    BOLD_POP_ART = "bold-pop-art"
    STEAMPUNK_VICTORIAN = "steampunk-victorian"
    MINIMALIST_FLAT = "minimalist-flat"
    BAROQUE_PAINTING = "baroque-painting"
    ABSTRACT_CUBIST = "abstract-cubist"


@dataclass(frozen=True)
class StyleDescriptor:
    id: ArtStyle
    title: str
    prompt: str
    color: str

    def to_dict(self) -> dict:
        return {
            "id": self.id.value,
            "title": self.title,
            "prompt": self.prompt,
            "color": self.color,
        }


STYLE_CATALOG = MappingProxyType(
    {
        ArtStyle.CYBERPUNK_NEON: StyleDescriptor(
            ArtStyle.CYBERPUNK_NEON,
            "Cyberpunk Neon",
            "Transform this image into a dark cyberpunk aesthetic with vibrant neon lights, "
            "high-contrast shadows, and a futuristic cityscape vibe.",
            "purple",
        ),
        ArtStyle.VINTAGE_SEPIA: StyleDescriptor(
            ArtStyle.VINTAGE_SEPIA,
            "Vintage Sepia",
            "Reinterpret this image in a warm, vintage sepia tone, reminiscent of old "
            "photographs, with soft grain and faded edges.",
            "brown",
        ),
        ArtStyle.WHIMSICAL_WATERCOLOR: StyleDescriptor(
            ArtStyle.WHIMSICAL_WATERCOLOR,
            "Whimsical Watercolor",
            "Repaint this image in a whimsical watercolor style using pastel colors, gentle "
            "brush strokes, and soft, diffused outlines.",
            "blue",
        ),
        ArtStyle.BOLD_POP_ART: StyleDescriptor(
            ArtStyle.BOLD_POP_ART,
            "Bold Pop Art",
            "Apply a bold pop art style with flat, saturated colors, thick black outlines, "
            "and a graphic, comic-book aesthetic.",
            "red",
        ),
        ArtStyle.STEAMPUNK_VICTORIAN: StyleDescriptor(
            ArtStyle.STEAMPUNK_VICTORIAN,
            "Steampunk Victorian",
            "Reimagine this image with a steampunk Victorian flair, featuring mechanical "
            "gears, brass tones, and an ornate, old-world industrial atmosphere.",
            "orange",
        ),
        ArtStyle.MINIMALIST_FLAT: StyleDescriptor(
            ArtStyle.MINIMALIST_FLAT,
            "Minimalist Flat",
            "Simplify this image into a minimalist flat art style, using clean shapes, flat "
            "colors, and a subdued color palette.",
            "gray",
        ),
        ArtStyle.BAROQUE_PAINTING: StyleDescriptor(
            ArtStyle.BAROQUE_PAINTING,
            "Baroque Painting",
            "Render this image as a dramatic baroque-style painting, with rich, deep "
            "shadows, warm candlelit highlights, and ornate, classical detailing.",
            "indigo",
        ),
        ArtStyle.ABSTRACT_CUBIST: StyleDescriptor(
            ArtStyle.ABSTRACT_CUBIST,
            "Abstract Cubist",
            "Transform this image in an abstract cubist style, reducing elements into "
            "geometric shapes, bold angles, and fragmented perspectives.",
            "green",
        ),
    }
)


def get_style(style_id) -> StyleDescriptor:
    """Look up a style by enum member or id string. Unknown ids raise ValueError."""
    return STYLE_CATALOG[ArtStyle(style_id)]


def prompt_for(style_id) -> str:
    return get_style(style_id).prompt


def title_for(style_id) -> str:
    return get_style(style_id).title


def list_styles() -> list:
    return list(STYLE_CATALOG.values())
