from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict, Tuple

from PIL import Image, ImageFilter, ImageOps

from ..errors import TransformError
from ..models import EnhancementStrategy

Operation = Callable[..., Image.Image]


@lru_cache(maxsize=16)
def gamma_curve(gamma: float) -> Tuple[int, ...]:
    """8-bit tone curve ``255 * (v / 255) ** (1 / gamma)``, rounded."""
    exponent = 1.0 / gamma
    return tuple(round(255 * (level / 255) ** exponent) for level in range(256))


def apply_gamma(img: Image.Image, gamma: float) -> Image.Image:
    """Lift midtones for ``gamma > 1``; black and white stay put."""
    if abs(gamma - 1.0) < 1e-3:
        return img
    return img.point(list(gamma_curve(gamma)) * len(img.getbands()))


def normalize(img: Image.Image, cutoff: float = 2.0) -> Image.Image:
    # Saturate ``cutoff`` percent at each end so dithering is not muddy.
    return ImageOps.autocontrast(img, cutoff=cutoff)


def local_contrast(img: Image.Image, radius: float = 10.0, strength: int = 30) -> Image.Image:
    """Boost contrast against the local neighbourhood average.

    An unsharp mask with a wide radius and zero threshold behaves as a local
    contrast filter rather than an edge sharpener.
    """
    if radius <= 0 or strength <= 0:
        return img
    return img.filter(ImageFilter.UnsharpMask(radius=radius, percent=int(strength), threshold=0))


OPERATIONS: Dict[str, Operation] = {
    "gamma": apply_gamma,
    "normalize": normalize,
    "local_contrast": local_contrast,
}


def apply_strategy(img: Image.Image, strategy: EnhancementStrategy) -> Image.Image:
    for step in strategy.steps:
        operation = OPERATIONS.get(step.name)
        if operation is None:
            raise TransformError(f"Unknown enhancement step '{step.name}'")
        try:
            img = operation(img, **step.kwargs)
        except (TypeError, ValueError, OSError) as exc:
            raise TransformError(f"Enhancement step '{step.name}' failed: {exc}") from exc
    return img
