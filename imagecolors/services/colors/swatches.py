"""
Palette Swatch Module

Derives the six named swatches (vibrant, dark/light vibrant, muted,
dark/light muted) and the four-color summary from sampled pixels.

Swatch extraction works on fine color buckets (5 bits per channel) rather
than raw pixels. Every bucket is scored against each target band using its
HSL saturation, lightness and population, and joins the band where it scores
best. Inside a band the buckets are split by hue sector and the strongest
sector supplies the swatch, so two unrelated hues are never blended into one
swatch color.
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .accumulators import DominantColorFinder
from .utils import Color, rgb_to_hsl, shift_lightness


SWATCH_NAMES = (
    "vibrant", "dark_vibrant", "light_vibrant",
    "muted", "dark_muted", "light_muted",
)

# Lightness limits outside which a bucket is treated as black or white
BLACK_MAX_LIGHTNESS = 0.05
WHITE_MIN_LIGHTNESS = 0.95

DETAIL_LIGHTNESS_SHIFT = -0.3


@dataclass(frozen=True)
class SwatchTarget:
    """Saturation/lightness band a swatch is drawn from."""
    name: str
    min_saturation: float
    target_saturation: float
    max_saturation: float
    min_lightness: float
    target_lightness: float
    max_lightness: float

    def admits(self, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
        return ((saturation >= self.min_saturation) & (saturation <= self.max_saturation) &
                (lightness >= self.min_lightness) & (lightness <= self.max_lightness))

    def closeness(self, saturation: np.ndarray, lightness: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Closeness to the target saturation and lightness, 1 at the target and
        0 at the far edge of the band.
        """
        return (_band_closeness(saturation, self.min_saturation, self.target_saturation, self.max_saturation),
                _band_closeness(lightness, self.min_lightness, self.target_lightness, self.max_lightness))


def _band_closeness(values: np.ndarray, low: float, target: float, high: float) -> np.ndarray:
    half_width = max(target - low, high - target)
    if half_width <= 0:
        return np.ones_like(values, dtype=np.float64)
    return np.clip(1.0 - np.abs(values - target) / half_width, 0.0, 1.0)


_VIBRANT_S = (0.35, 1.0, 1.0)
_MUTED_S = (0.0, 0.3, 0.4)
_NORMAL_L = (0.3, 0.5, 0.7)
_DARK_L = (0.0, 0.26, 0.45)
_LIGHT_L = (0.55, 0.74, 1.0)

# Earlier targets win score ties
DEFAULT_TARGETS: Tuple[SwatchTarget, ...] = (
    SwatchTarget("vibrant", *_VIBRANT_S, *_NORMAL_L),
    SwatchTarget("dark_vibrant", *_VIBRANT_S, *_DARK_L),
    SwatchTarget("light_vibrant", *_VIBRANT_S, *_LIGHT_L),
    SwatchTarget("muted", *_MUTED_S, *_NORMAL_L),
    SwatchTarget("dark_muted", *_MUTED_S, *_DARK_L),
    SwatchTarget("light_muted", *_MUTED_S, *_LIGHT_L),
)


@dataclass(frozen=True)
class Swatch:
    name: str
    color: Color
    population: int

    @property
    def hex(self) -> str:
        return self.color.hex


class SummaryColors(NamedTuple):
    background: Color
    primary: Color
    secondary: Color
    detail: Color


class SwatchExtractor:
    """
    Population-weighted swatch extraction over HSL target bands.

    Args:
        targets: Bands to fill, in tie-break order
        saturation_weight: Weight of closeness to the target saturation
        lightness_weight: Weight of closeness to the target lightness
        population_weight: Weight of bucket population relative to the largest bucket
        min_score: Buckets scoring below this join no band
        hue_sector_degrees: Width of the hue sectors a band is split into
        fine_bits: Bits kept per channel when bucketing pixels
    """

    def __init__(self,
                 targets: Sequence[SwatchTarget] = DEFAULT_TARGETS,
                 saturation_weight: float = 0.24,
                 lightness_weight: float = 0.52,
                 population_weight: float = 0.24,
                 min_score: float = 0.35,
                 hue_sector_degrees: float = 30.0,
                 fine_bits: int = 5):
        if not 1 <= fine_bits <= 8:
            raise ValueError(f"fine_bits must be in [1, 8], got {fine_bits}")
        self.targets = tuple(targets)
        self.saturation_weight = saturation_weight
        self.lightness_weight = lightness_weight
        self.population_weight = population_weight
        self.min_score = min_score
        self.hue_sector_degrees = hue_sector_degrees
        self.fine_bits = fine_bits

    def _fine_buckets(self, pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (mean colors, populations, channel sums) per fine bucket."""
        shift = 8 - self.fine_bits
        reduced = (pixels >> shift).astype(np.int64)
        keys = (reduced[:, 0] << (2 * self.fine_bits)) | (reduced[:, 1] << self.fine_bits) | reduced[:, 2]

        _, inverse, counts = np.unique(keys, return_inverse=True, return_counts=True)
        inverse = inverse.reshape(-1)

        sums = np.stack([
            np.rint(np.bincount(inverse, weights=pixels[:, c], minlength=counts.shape[0]))
            for c in range(3)
        ], axis=1).astype(np.int64)
        means = sums // counts[:, None]
        return means, counts.astype(np.int64), sums

    def score(self, saturation: np.ndarray, lightness: np.ndarray,
              population: np.ndarray, target: SwatchTarget) -> np.ndarray:
        """Score buckets against one target; -inf where the band rejects them."""
        max_population = max(int(population.max()), 1) if population.size else 1
        saturation_fit, lightness_fit = target.closeness(saturation, lightness)
        value = (self.saturation_weight * saturation_fit +
                 self.lightness_weight * lightness_fit +
                 self.population_weight * (population / max_population))
        return np.where(target.admits(saturation, lightness), value, -np.inf)

    def extract(self, pixels_rgb_u8: np.ndarray) -> Dict[str, Optional[Swatch]]:
        """
        Extract named swatches from opaque pixels.

        Args:
            pixels_rgb_u8: Opaque sampled pixels (N, 3) uint8

        Returns:
            Mapping of every target name to a Swatch, or None when no pixels
            qualified for that band
        """
        swatches: Dict[str, Optional[Swatch]] = {target.name: None for target in self.targets}

        pixels = np.asarray(pixels_rgb_u8, dtype=np.uint8).reshape(-1, 3)
        if pixels.shape[0] == 0:
            logger.debug("No opaque pixels; all swatches absent")
            return swatches

        means, populations, sums = self._fine_buckets(pixels)
        hsl = rgb_to_hsl(means)
        hue, saturation, lightness = hsl[:, 0], hsl[:, 1], hsl[:, 2]

        chromatic_range = (lightness > BLACK_MAX_LIGHTNESS) & (lightness < WHITE_MIN_LIGHTNESS)
        if not chromatic_range.any():
            logger.debug("Only near-black/near-white pixels; all swatches absent")
            return swatches

        keep = np.flatnonzero(chromatic_range)
        hue, saturation, lightness = hue[keep], saturation[keep], lightness[keep]
        populations, sums = populations[keep], sums[keep]

        scores = np.stack([
            self.score(saturation, lightness, populations, target) for target in self.targets
        ])
        best_target = np.argmax(scores, axis=0)
        best_score = scores[best_target, np.arange(scores.shape[1])]
        assigned = best_score >= self.min_score

        n_sectors = int(np.ceil(360.0 / self.hue_sector_degrees))
        sectors = (hue // self.hue_sector_degrees).astype(np.int64) % n_sectors

        for index, target in enumerate(self.targets):
            members = assigned & (best_target == index)
            if not members.any():
                continue

            weight = best_score * populations
            strength = np.bincount(sectors[members], weights=weight[members], minlength=n_sectors)
            # argmax keeps the lowest sector on ties
            sector = int(np.argmax(strength))

            chosen = members & (sectors == sector)
            population = int(populations[chosen].sum())
            if population == 0:
                continue

            r, g, b = (int(v) // population for v in sums[chosen].sum(axis=0))
            swatches[target.name] = Swatch(target.name, Color(r, g, b), population)

        logger.debug("Swatches: " + ", ".join(
            f"{name}={swatch.hex if swatch else None}" for name, swatch in swatches.items()
        ))
        return swatches


def summarize(background: Color, finder: DominantColorFinder) -> SummaryColors:
    """
    Build the four-color summary.

    primary and secondary are the true-color means of the two most populous
    buckets; secondary repeats primary when only one bucket exists, and both
    fall back to the background when nothing was sampled. detail is primary
    with its lightness shifted toward black.
    """
    ranked = finder.ranked()

    if ranked:
        primary = finder.representative(ranked[0][0])
        secondary = finder.representative(ranked[1][0]) if len(ranked) > 1 else primary
    else:
        primary = secondary = background

    detail = shift_lightness(primary, DETAIL_LIGHTNESS_SHIFT)
    return SummaryColors(background, primary, secondary, detail)
