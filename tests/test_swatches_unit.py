"""
Unit tests for palette swatch extraction and the four-color summary.
"""

import numpy as np
import pytest

from imagecolors.services.colors.accumulators import AverageColorAccumulator, DominantColorFinder
from imagecolors.services.colors.sampling import sample_pixels
from imagecolors.services.colors.swatches import (
    DEFAULT_TARGETS, SWATCH_NAMES, SwatchExtractor, summarize
)
from imagecolors.services.colors.utils import BLACK, Color, rgb_to_hsl


def pixels_of(*groups):
    """Stack (color, count) groups into an (N, 3) pixel array in order."""
    rows = []
    for color, count in groups:
        rows.extend([color] * count)
    return np.array(rows, dtype=np.uint8).reshape(-1, 3)


@pytest.fixture
def extractor():
    return SwatchExtractor()


class TestSwatchTargets:
    """Test target band definitions"""

    def test_every_name_has_a_target(self):
        assert {target.name for target in DEFAULT_TARGETS} == set(SWATCH_NAMES)

    def test_invalid_fine_bits(self):
        with pytest.raises(ValueError):
            SwatchExtractor(fine_bits=0)


class TestSwatchExtractor:
    """Test band assignment and representative colors"""

    def test_no_pixels_gives_all_absent(self, extractor):
        swatches = extractor.extract(np.zeros((0, 3), dtype=np.uint8))
        assert set(swatches) == set(SWATCH_NAMES)
        assert all(swatch is None for swatch in swatches.values())

    def test_black_and_white_never_form_swatches(self, extractor):
        swatches = extractor.extract(pixels_of(((0, 0, 0), 50), ((255, 255, 255), 50)))
        assert all(swatch is None for swatch in swatches.values())

    def test_uniform_color_keeps_its_hue(self, extractor):
        swatches = extractor.extract(pixels_of(((200, 100, 50), 64)))
        vibrant = swatches["vibrant"]
        assert vibrant is not None
        assert vibrant.color == Color(200, 100, 50)
        assert vibrant.population == 64

        source_hue = rgb_to_hsl(np.array([[200, 100, 50]]))[0, 0]
        for swatch in swatches.values():
            if swatch is not None:
                hue = rgb_to_hsl(np.array([swatch.color]))[0, 0]
                assert abs(hue - source_hue) < 1.0

    def test_each_band_is_filled_from_matching_pixels(self, extractor):
        pixels = pixels_of(
            ((255, 0, 0), 20),      # vibrant
            ((20, 40, 100), 20),    # dark vibrant
            ((255, 160, 160), 20),  # light vibrant
            ((120, 110, 100), 20),  # muted
            ((50, 45, 40), 20),     # dark muted
            ((220, 210, 200), 20),  # light muted
        )
        swatches = extractor.extract(pixels)

        assert swatches["vibrant"].color == Color(255, 0, 0)
        assert swatches["dark_vibrant"].color == Color(20, 40, 100)
        assert swatches["light_vibrant"].color == Color(255, 160, 160)
        assert swatches["muted"].color == Color(120, 110, 100)
        assert swatches["dark_muted"].color == Color(50, 45, 40)
        assert swatches["light_muted"].color == Color(220, 210, 200)
        assert all(swatch.population == 20 for swatch in swatches.values())

    def test_representative_is_population_weighted_mean(self, extractor):
        swatches = extractor.extract(pixels_of(((255, 0, 0), 3), ((235, 0, 0), 1)))
        # (3 * 255 + 235) // 4
        assert swatches["vibrant"].color == Color(250, 0, 0)
        assert swatches["vibrant"].population == 4

    def test_unrelated_hues_are_not_blended(self, extractor):
        swatches = extractor.extract(pixels_of(((0, 255, 0), 6), ((255, 0, 0), 10)))
        assert swatches["vibrant"].color == Color(255, 0, 0)
        assert swatches["vibrant"].population == 10

    def test_equal_hue_groups_resolve_to_lowest_hue_sector(self, extractor):
        swatches = extractor.extract(pixels_of(((0, 0, 255), 8), ((255, 0, 0), 8)))
        assert swatches["vibrant"].color == Color(255, 0, 0)

    def test_weak_minority_bucket_is_rejected(self, extractor):
        # (144, 102, 60) sits near the low-saturation edge of the vibrant band
        # (S 0.41, L 0.40); as a 1% bucket it scores about 0.29
        pixels = pixels_of(((50, 45, 40), 100), ((144, 102, 60), 1))

        swatches = extractor.extract(pixels)
        assert swatches["dark_muted"].color == Color(50, 45, 40)
        assert swatches["vibrant"] is None
        assert swatches["dark_vibrant"] is None

        lenient = SwatchExtractor(min_score=0.0).extract(pixels)
        assert lenient["vibrant"].color == Color(144, 102, 60)

    def test_band_edge_scores_below_target(self, extractor):
        vibrant = DEFAULT_TARGETS[0]
        saturation = np.array([1.0, 0.35])
        lightness = np.array([0.5, 0.3])
        scores = extractor.score(saturation, lightness, np.array([0, 0]), vibrant)
        assert scores[0] == pytest.approx(0.76)
        assert scores[1] == pytest.approx(0.0)
        assert scores[1] < extractor.min_score

    def test_deterministic(self, extractor, noisy_source):
        pixels = sample_pixels(noisy_source).pixels
        assert extractor.extract(pixels) == extractor.extract(pixels)


class TestSummarize:
    """Test the four-color summary"""

    def _summary(self, source):
        sample = sample_pixels(source)
        average = AverageColorAccumulator()
        finder = DominantColorFinder()
        average.add(sample.pixels)
        finder.add(sample.pixels)
        return summarize(average.average(), finder)

    def test_two_buckets(self, red_blue_source):
        summary = self._summary(red_blue_source)
        assert summary.background == Color(127, 0, 127)
        assert summary.primary == Color(255, 0, 0)
        assert summary.secondary == Color(0, 0, 255)
        assert summary.detail == Color(102, 0, 0)

    def test_single_bucket_repeats_primary(self, uniform_source):
        summary = self._summary(uniform_source)
        assert summary.primary == Color(200, 100, 50)
        assert summary.secondary == summary.primary
        assert sum(summary.detail) < sum(summary.primary)

    def test_primary_uses_true_colors_not_grid(self):
        finder = DominantColorFinder()
        finder.add(pixels_of(((201, 99, 49), 2), ((203, 101, 51), 2)))
        summary = summarize(Color(202, 100, 50), finder)
        assert summary.primary == Color(202, 100, 50)

    def test_empty_image(self, transparent_source):
        summary = self._summary(transparent_source)
        assert summary.background == BLACK
        assert summary.primary == BLACK
        assert summary.secondary == BLACK
        assert summary.detail == BLACK
