from __future__ import annotations

from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..errors import DecodeError

# Rec. 709 luma weights, applied through Image.convert's matrix form.
REC709_MATRIX = (0.2126, 0.7152, 0.0722, 0.0)


def open_source(path: Path) -> Image.Image:
    """Decode ``path`` fully and return an RGB image.

    Transparent pixels are flattened onto white so that they dither to
    paper rather than ink.
    """
    try:
        with Image.open(path) as img:
            img.load()
            return flatten_onto_white(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"Cannot decode {path.name}: {exc}") from exc


def flatten_onto_white(img: Image.Image) -> Image.Image:
    if img.mode == "I" or img.mode.startswith("I;16"):
        # 16-bit grayscale would clip to white in a direct RGB conversion.
        img = img.convert("I").point(lambda value: value * (1 / 256)).convert("L")
    if img.mode == "P" and "transparency" in img.info:
        img = img.convert("RGBA")
    if img.mode in ("RGBA", "LA", "PA"):
        rgba = img.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        return Image.alpha_composite(background, rgba).convert("RGB")
    return img.convert("RGB")


def to_luma(img: Image.Image) -> Image.Image:
    """Perceptual grayscale using Rec. 709 weights instead of a channel average."""
    if img.mode == "L":
        return img
    return img.convert("RGB").convert("L", matrix=REC709_MATRIX)
