import pytest
from PIL import Image

from pdi_builder.errors import DecodeError
from pdi_builder.processing.source import open_source, to_luma
from pdi_builder.processing.stats import compute_statistics, mask_region


def _banner_image() -> Image.Image:
    # Bright banner on the leftmost 20% of the width, mid-gray elsewhere.
    img = Image.new("RGB", (100, 40), color=(128, 128, 128))
    img.paste((255, 255, 255), (0, 0, 20, 40))
    return img


def test_uniform_image_has_zero_stddev():
    stats = compute_statistics(Image.new("RGB", (10, 10), color=(64, 64, 64)), 0)

    assert stats.mean == pytest.approx(64 / 255, abs=0.01)
    assert stats.stddev == pytest.approx(0.0, abs=1e-6)


def test_luma_uses_perceptual_weights():
    # Pure green is far brighter than pure blue under Rec. 709 weights.
    green = to_luma(Image.new("RGB", (2, 2), color=(0, 255, 0))).getpixel((0, 0))
    blue = to_luma(Image.new("RGB", (2, 2), color=(0, 0, 255))).getpixel((0, 0))

    assert green == pytest.approx(182, abs=2)
    assert blue == pytest.approx(18, abs=2)


def test_mask_excludes_left_banner_from_statistics():
    img = _banner_image()

    unmasked = compute_statistics(img, 0)
    masked = compute_statistics(img, 20)

    assert masked.mean == pytest.approx(128 / 255, abs=0.01)
    assert masked.stddev == pytest.approx(0.0, abs=1e-6)
    assert unmasked.mean > masked.mean
    assert unmasked.stddev > masked.stddev


def test_mask_region_keeps_at_least_one_column():
    gray = Image.new("L", (3, 3))

    assert mask_region(gray, 99.9).size == (1, 3)
    assert mask_region(gray, 0).size == (3, 3)


def test_compute_statistics_reads_path(tmp_path):
    path = tmp_path / "dark.png"
    Image.new("L", (8, 8), color=25).save(path)

    stats = compute_statistics(path, 0)

    assert stats.source_path == path
    assert stats.mean == pytest.approx(0.1, abs=0.01)


def test_transparent_pixels_measure_as_white(tmp_path):
    path = tmp_path / "clear.png"
    Image.new("RGBA", (4, 4), color=(0, 0, 0, 0)).save(path)

    assert compute_statistics(path, 0).mean == pytest.approx(1.0, abs=0.01)


def test_undecodable_file_raises_decode_error(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")

    with pytest.raises(DecodeError):
        open_source(path)


def test_sixteen_bit_grayscale_is_scaled_not_clipped(tmp_path):
    path = tmp_path / "deep.png"
    Image.new("I;16", (16, 16), 32768).save(path)

    stats = compute_statistics(path, 0)

    assert stats.mean == pytest.approx(0.5, abs=0.01)
    assert stats.stddev == pytest.approx(0.0, abs=1e-6)
