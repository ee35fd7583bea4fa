import asyncio
import io
import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from stripbooth.config import Settings, settings as default_settings
from stripbooth.exceptions import DecodeError
from stripbooth.models.booth import PatternKind
from stripbooth.services import patterns
from stripbooth.services.slots import Bitmap

logger = logging.getLogger(__name__)

SERIF_ITALIC_FONTS = [
    "DejaVuSerif-Italic.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSerif-Italic.ttf",
    "/System/Library/Fonts/Supplemental/Times New Roman Italic.ttf",
    "timesi.ttf",
]
SANS_FONTS = [
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "arial.ttf",
]


@lru_cache(maxsize=None)
def load_font(size: int, italic_serif: bool = False):
    for font_path in SERIF_ITALIC_FONTS if italic_serif else SANS_FONTS:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


@dataclass(frozen=True)
class StripGeometry:
    width: int
    frame_x: int
    frame_width: int
    frame_height: int
    first_frame_top: int
    spacing: int
    height: int

    @classmethod
    def for_strip(cls, slot_count: int, portrait: bool, config: Settings = default_settings) -> "StripGeometry":
        frame_width = config.strip_width - 2 * config.frame_inset
        if portrait:
            frame_height = round(frame_width * config.portrait_frame_ratio)
        else:
            frame_height = config.landscape_frame_height
        spacing = frame_height + config.frame_gap
        return cls(
            width=config.strip_width,
            frame_x=config.frame_inset,
            frame_width=frame_width,
            frame_height=frame_height,
            first_frame_top=config.first_frame_top,
            spacing=spacing,
            height=config.header_allowance + slot_count * spacing,
        )

    def frame_box(self, index: int) -> Tuple[int, int, int, int]:
        """(left, top, right, bottom) of a slot's frame, right/bottom exclusive."""
        top = self.first_frame_top + index * self.spacing
        return self.frame_x, top, self.frame_x + self.frame_width, top + self.frame_height


@dataclass(frozen=True)
class CoverFit:
    draw_width: float
    draw_height: float
    offset_x: float
    offset_y: float
    crop_box: Tuple[float, float, float, float]


def cover_fit(src_width: int, src_height: int, frame_width: int, frame_height: int) -> CoverFit:
    """Scale a source to fill the frame, centering the overflow.

    ``offset_x``/``offset_y`` are where the scaled source lands relative to the
    frame (zero or negative). ``crop_box`` is the visible part of the source
    in source pixels.
    """
    src_aspect = src_width / src_height
    frame_aspect = frame_width / frame_height

    if src_aspect > frame_aspect:
        # Wider than the frame: match heights, crop left and right
        scale = frame_height / src_height
        draw_width, draw_height = src_width * scale, float(frame_height)
        offset_x, offset_y = -(draw_width - frame_width) / 2, 0.0
    else:
        # Taller than the frame: match widths, crop top and bottom
        scale = frame_width / src_width
        draw_width, draw_height = float(frame_width), src_height * scale
        offset_x, offset_y = 0.0, -(draw_height - frame_height) / 2

    left = -offset_x / scale
    top = -offset_y / scale
    crop_box = (
        max(left, 0.0),
        max(top, 0.0),
        min(left + frame_width / scale, float(src_width)),
        min(top + frame_height / scale, float(src_height)),
    )
    return CoverFit(draw_width, draw_height, offset_x, offset_y, crop_box)


def _decode(index: int, bitmap: Bitmap) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(bitmap.png))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(index, str(e)) from e
    return image.convert("RGB")


def resolve_border_color(border_color: str, config: Settings = default_settings) -> Tuple[int, int, int]:
    try:
        return ImageColor.getrgb(border_color)[:3]
    except (ValueError, TypeError, AttributeError):
        logger.warning("Unusable border color %r, falling back to %s", border_color, config.default_border_color)
        return ImageColor.getrgb(config.default_border_color)[:3]


def format_strip_date(day: date) -> str:
    return f"{day.month}/{day.day}/{day.year}"


def _draw_centered_text(draw: ImageDraw.ImageDraw, text: str, center_x: int, baseline: int, font, fill):
    left, _, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = center_x - (right - left) / 2 - left
    y = baseline - bottom
    draw.text((x, y), text, font=font, fill=fill)


class Compositor:
    def __init__(self, config: Settings = default_settings):
        self.config = config

    def geometry(self, slot_count: int, portrait: bool) -> StripGeometry:
        return StripGeometry.for_strip(slot_count, portrait, self.config)

    async def decode_all(self, slots: Sequence[Optional[Bitmap]]) -> dict:
        """Decode every filled slot concurrently; a single failure fails them all."""
        filled = [(index, bitmap) for index, bitmap in enumerate(slots) if bitmap is not None]
        images = await asyncio.gather(
            *(asyncio.to_thread(_decode, index, bitmap) for index, bitmap in filled)
        )
        return {index: image for (index, _), image in zip(filled, images)}

    async def compose(self, slots: Sequence[Optional[Bitmap]], border_color: str,
                      pattern_kind: PatternKind, portrait: bool,
                      today: Optional[date] = None) -> Image.Image:
        slots = tuple(slots)
        decoded = await self.decode_all(slots)

        geometry = self.geometry(len(slots), portrait)
        strip = Image.new("RGB", (geometry.width, geometry.height), self.config.background_color)
        patterns.render(strip, geometry.width, geometry.height, pattern_kind)

        draw = ImageDraw.Draw(strip)
        _draw_centered_text(
            draw, self.config.header_text, geometry.width // 2, self.config.header_baseline,
            load_font(self.config.header_font_size, italic_serif=True), self.config.text_color,
        )

        color = resolve_border_color(border_color, self.config)
        for index in range(len(slots)):
            self._draw_frame(draw, geometry, index, color)
            if index in decoded:
                self._draw_photo(strip, geometry, index, decoded[index])

        footer = format_strip_date(today or date.today())
        _draw_centered_text(
            draw, footer, geometry.width // 2, geometry.height - self.config.footer_offset,
            load_font(self.config.footer_font_size), self.config.text_color,
        )

        logger.info("Composed %dx%d strip: %d of %d slots filled, pattern=%s",
                    geometry.width, geometry.height, len(decoded), len(slots), PatternKind(pattern_kind).value)
        return strip

    def _draw_frame(self, draw: ImageDraw.ImageDraw, geometry: StripGeometry,
                    index: int, color: Tuple[int, int, int]):
        # The stroke straddles the frame edge, half inside and half outside
        left, top, right, bottom = geometry.frame_box(index)
        half = self.config.border_width // 2
        draw.rectangle(
            (left - half, top - half, right + half - 1, bottom + half - 1),
            outline=color, width=self.config.border_width,
        )

    def _draw_photo(self, strip: Image.Image, geometry: StripGeometry, index: int, image: Image.Image):
        left, top, _, _ = geometry.frame_box(index)
        fit = cover_fit(image.width, image.height, geometry.frame_width, geometry.frame_height)
        # Resampling only the visible crop clips the photo to the frame exactly
        photo = image.resize(
            (geometry.frame_width, geometry.frame_height),
            Image.Resampling.LANCZOS,
            box=fit.crop_box,
        )
        strip.paste(photo, (left, top))
