"""Best-effort shapes for replies that should have drawn something but didn't.

When the assistant emits no canvas directive although the user clearly asked
for something visual, we synthesize a handful of default shapes from keywords
in the *user's* request. Output is deterministic and never larger than
``MAX_FALLBACK_SHAPES``.
"""

import logging
import re
from typing import List

from ai_cofounder.core_models import Directive, ShapeType

log = logging.getLogger(__name__)

MAX_FALLBACK_SHAPES = 3

# English plus the Russian vocabulary the product's users actually write in.
_RECTANGLE_WORDS = r"rectangle|box|square|прямоугольник|квадрат|блок"
_CIRCLE_WORDS = r"circle|круг"
_VISUAL_WORDS = r"diagram|chart|draw|shape|sketch|visual|диаграмм|схем|нарисуй|рисун|фигур"

_RECTANGLE_RE = re.compile(rf"\b(?:{_RECTANGLE_WORDS})", re.IGNORECASE)
_CIRCLE_RE = re.compile(rf"\b(?:{_CIRCLE_WORDS})", re.IGNORECASE)
_VISUAL_RE = re.compile(rf"\b(?:{_VISUAL_WORDS})", re.IGNORECASE)
# Any digit counts: "3 rectangles", "draw 3 big blue boxes", "rectangles, 3 of them"
_DIGIT_RE = re.compile(r"\d")

# Side by side, 100x60 each, 50 units apart.
PRESET_RECTANGLES: List[dict] = [
    {"x": 50, "y": 100, "width": 100, "height": 60},
    {"x": 200, "y": 100, "width": 100, "height": 60},
    {"x": 350, "y": 100, "width": 100, "height": 60},
]


def has_visual_intent(user_request: str | None) -> bool:
    """True if the request mentions any shape or drawing keyword."""
    if not user_request:
        return False
    return any(rx.search(user_request) for rx in (_RECTANGLE_RE, _CIRCLE_RE, _VISUAL_RE))


def synthesize_fallback_shapes(user_request: str | None) -> List[Directive]:
    """Return default shape directives inferred from *user_request*.

    * "N rectangles" → the three preset rectangles.
    * otherwise one rectangle and/or one circle per matched category.
    * generic drawing words only → a single default rectangle.
    * nothing visual → empty list.
    """
    if not has_visual_intent(user_request):
        return []

    if _DIGIT_RE.search(user_request) and _RECTANGLE_RE.search(user_request):
        log.info("Fallback: counted rectangles requested, using %d presets", len(PRESET_RECTANGLES))
        return [Directive(ShapeType.RECTANGLE.value, dict(p)) for p in PRESET_RECTANGLES]

    shapes: List[Directive] = []
    if _RECTANGLE_RE.search(user_request):
        shapes.append(Directive(ShapeType.RECTANGLE.value, {}))
    if _CIRCLE_RE.search(user_request):
        shapes.append(Directive(ShapeType.CIRCLE.value, {}))
    if not shapes:
        shapes.append(Directive(ShapeType.RECTANGLE.value, {}))

    log.info("Fallback: synthesized %s", [s.type_identifier for s in shapes])
    return shapes[:MAX_FALLBACK_SHAPES]
