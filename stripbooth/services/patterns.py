import random
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from stripbooth.config import settings
from stripbooth.models.booth import PatternKind

DOT_SPACING = 40
DOT_OFFSET = 10
DOT_RADIUS = 2

STAR_COUNT = 50
STAR_MIN_SIZE = 1
STAR_MAX_SIZE = 4

HEART_SPACING = 60
HEART_OFFSET = 20
HEART_SIZE = 12  # glyph box of a 16px heart


def star_marks(width: int, height: int, rng: random.Random = None) -> List[Tuple[float, float, float]]:
    """Pick (x, y, size) for every star; positions lie inside the buffer."""
    rng = rng or random.Random()
    marks = []
    for _ in range(STAR_COUNT):
        x = rng.random() * width
        y = rng.random() * height
        size = STAR_MIN_SIZE + rng.random() * (STAR_MAX_SIZE - STAR_MIN_SIZE)
        marks.append((x, y, size))
    return marks


def star_box(x: float, y: float, size: float) -> Tuple[int, int, int, int]:
    """Inclusive pixel box covered by a star of side ``size`` at (x, y)."""
    left, top = int(x), int(y)
    return left, top, int(x + size) - 1, int(y + size) - 1


def _grid(width: int, height: int, offset: int, spacing: int):
    for x in range(offset, width, spacing):
        for y in range(offset, height, spacing):
            yield x, y


def _draw_heart(draw: ImageDraw.ImageDraw, x: int, y: int, fill: int):
    # (x, y) is the glyph origin on the text baseline, so the heart sits above it
    s = HEART_SIZE
    r = s / 4
    top = y - s
    draw.ellipse((x, top, x + 2 * r, top + 2 * r), fill=fill)
    draw.ellipse((x + 2 * r, top, x + s, top + 2 * r), fill=fill)
    draw.polygon([(x, top + r), (x + s, top + r), (x + s / 2, y)], fill=fill)


def render(buffer: Image.Image, width: int, height: int, kind: PatternKind,
           rng: Optional[random.Random] = None):
    """Paint the strip background into ``buffer``.

    The area is always filled with the opaque base color first; every kind
    except ``solid`` then gets a white overlay at ``settings.pattern_opacity``.
    """
    kind = PatternKind(kind)
    draw = ImageDraw.Draw(buffer)
    draw.rectangle((0, 0, width - 1, height - 1), fill=settings.background_color)

    if kind == PatternKind.solid:
        return

    alpha = round(255 * settings.pattern_opacity)

    if kind == PatternKind.stars:
        # Overlapping stars accumulate alpha
        overlay = ImageDraw.Draw(buffer, "RGBA")
        for x, y, size in star_marks(width, height, rng):
            overlay.rectangle(star_box(x, y, size), fill=(255, 255, 255, alpha))
        return

    mask = Image.new("L", (width, height), 0)
    mask_draw = ImageDraw.Draw(mask)

    if kind == PatternKind.dots:
        for x, y in _grid(width, height, DOT_OFFSET, DOT_SPACING):
            mask_draw.ellipse((x - DOT_RADIUS, y - DOT_RADIUS, x + DOT_RADIUS, y + DOT_RADIUS), fill=alpha)
    elif kind == PatternKind.hearts:
        for x, y in _grid(width, height, HEART_OFFSET, HEART_SPACING):
            _draw_heart(mask_draw, x, y, alpha)

    buffer.paste((255, 255, 255), (0, 0, width, height), mask)
