import numpy as np
import pytest

from ImageOrdering.core.exceptions import InvalidSizeError
from ImageOrdering.features import (
    ColorHistogramExtractor,
    compute_distance_store,
    extract_descriptors,
)

from conftest import write_two_tone_image


@pytest.fixture
def extractor():
    return ColorHistogramExtractor(bins=(8, 8, 8))


def test_bins_validation():
    assert ColorHistogramExtractor(bins=16).bins == (16, 16, 16)
    with pytest.raises(ValueError):
        ColorHistogramExtractor(bins=(8, 8))
    with pytest.raises(ValueError):
        ColorHistogramExtractor(bins=(8, 0, 8))
    with pytest.raises(ValueError):
        ColorHistogramExtractor(comparison='earth_movers')


def test_histogram_shape_and_mass(extractor, tmp_path):
    descriptor = extractor.extract(write_two_tone_image(tmp_path / "a.png", 4))
    assert descriptor.histogram.shape == (8, 8, 8)
    assert descriptor.histogram.sum() == pytest.approx(100)
    assert descriptor.histogram[0, 0, 7] == pytest.approx(40)
    assert descriptor.histogram[7, 0, 0] == pytest.approx(60)


def test_grayscale_and_alpha_inputs(extractor):
    gray = np.full((4, 4), 128, dtype=np.uint8)
    assert extractor.compute(gray).sum() == pytest.approx(16)
    bgra = np.zeros((4, 4, 4), dtype=np.uint8)
    assert extractor.compute(bgra)[0, 0, 0] == pytest.approx(16)


def test_distances_follow_colour_share(extractor, tmp_path):
    a = extractor.extract(write_two_tone_image(tmp_path / "a.png", 5))
    a_copy = extractor.extract(write_two_tone_image(tmp_path / "a_copy.png", 5))
    near = extractor.extract(write_two_tone_image(tmp_path / "near.png", 6))
    far = extractor.extract(write_two_tone_image(tmp_path / "far.png", 10))

    assert extractor.distance(a, a_copy) == pytest.approx(0.0, abs=1e-6)
    assert extractor.distance(a, near) < extractor.distance(a, far)
    assert extractor.distance(a, near) == pytest.approx(extractor.distance(near, a))
    assert extractor.distance(a, far) >= 0.0


@pytest.mark.parametrize("comparison", ['chi_square', 'chi_square_alt', 'hellinger'])
def test_other_comparisons_are_symmetric(tmp_path, comparison):
    extractor = ColorHistogramExtractor(bins=8, comparison=comparison)
    lhs = extractor.extract(write_two_tone_image(tmp_path / "l.png", 3))
    rhs = extractor.extract(write_two_tone_image(tmp_path / "r.png", 6))
    assert extractor.distance(lhs, rhs) == pytest.approx(extractor.distance(rhs, lhs))


def test_cleared_descriptor(extractor, tmp_path):
    a = extractor.extract(write_two_tone_image(tmp_path / "a.png", 5))
    b = extractor.extract(write_two_tone_image(tmp_path / "b.png", 2))
    b.clear()
    assert b.is_empty
    with pytest.raises(ValueError):
        extractor.distance(a, b)


def test_unreadable_file(extractor, tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"definitely not a png")
    assert extractor.extract(broken) is None
    assert extractor.extract(tmp_path / "missing.png") is None


@pytest.mark.parametrize("workers", [1, 3])
def test_extract_descriptors_drops_failures(extractor, tmp_path, workers):
    paths = [
        write_two_tone_image(tmp_path / "0.png", 1),
        tmp_path / "1.png",
        write_two_tone_image(tmp_path / "2.png", 9),
    ]
    paths[1].write_bytes(b"junk")

    descriptors, kept, dropped = extract_descriptors(paths, extractor, workers=workers)
    assert kept == [paths[0], paths[2]]
    assert dropped == [paths[1]]
    assert [d.path for d in descriptors] == kept


def test_compute_distance_store(extractor, tmp_path):
    paths = [write_two_tone_image(tmp_path / f"{i}.png", i * 3) for i in range(4)]
    descriptors, _, _ = extract_descriptors(paths, extractor, workers=1)
    store = compute_distance_store(descriptors, extractor.distance, workers=2)
    assert store.size == 4
    assert store.get(0, 1) < store.get(0, 3)
    assert store.get(2, 1) == pytest.approx(extractor.distance(descriptors[1], descriptors[2]))

    with pytest.raises(InvalidSizeError):
        compute_distance_store([], extractor.distance)
