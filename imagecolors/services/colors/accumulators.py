"""
Running accumulators fed by the sampler.

Both accumulators accept batches of (N, 3) uint8 pixels in scan order and may
be fed several times; all channel math uses int64 and floor division.
"""

from typing import Dict, List, Tuple

import numpy as np

from .quantize import BUCKET_WIDTH, bucket_keys, unpack_key
from .utils import BLACK, Color


class AverageColorAccumulator:
    """Mean RGB over all opaque sampled pixels."""

    def __init__(self):
        self._sums = np.zeros(3, dtype=np.int64)
        self._count = 0

    def add(self, pixels_rgb_u8: np.ndarray) -> None:
        pixels = np.asarray(pixels_rgb_u8).reshape(-1, 3)
        if pixels.shape[0] == 0:
            return
        self._sums += pixels.sum(axis=0, dtype=np.int64)
        self._count += pixels.shape[0]

    @property
    def count(self) -> int:
        return self._count

    def average(self) -> Color:
        if self._count == 0:
            return BLACK
        r, g, b = (int(s) // self._count for s in self._sums)
        return Color(r, g, b)


class DominantColorFinder:
    """
    Frequency table over quantized color buckets.

    Buckets enter the table in order of first appearance, so when two
    buckets end with equal counts the one seen first in scan order wins.
    Each bucket also keeps the channel sums of the true pixel colors that
    fell into it.
    """

    def __init__(self, bucket_width: int = BUCKET_WIDTH):
        self.bucket_width = bucket_width
        # key -> [count, sum_r, sum_g, sum_b]; dict preserves insertion order
        self._table: Dict[int, List[int]] = {}

    def add(self, pixels_rgb_u8: np.ndarray) -> None:
        pixels = np.asarray(pixels_rgb_u8, dtype=np.uint8).reshape(-1, 3)
        if pixels.shape[0] == 0:
            return

        keys = bucket_keys(pixels, self.bucket_width)
        unique_keys, first_index, inverse, counts = np.unique(
            keys, return_index=True, return_inverse=True, return_counts=True
        )
        inverse = inverse.reshape(-1)

        sums = np.zeros((unique_keys.shape[0], 3), dtype=np.int64)
        np.add.at(sums, inverse, pixels.astype(np.int64))

        # np.unique sorts by key; restore first-seen order before inserting
        for i in np.argsort(first_index, kind="stable"):
            key = int(unique_keys[i])
            entry = self._table.get(key)
            if entry is None:
                entry = self._table[key] = [0, 0, 0, 0]
            entry[0] += int(counts[i])
            entry[1] += int(sums[i, 0])
            entry[2] += int(sums[i, 1])
            entry[3] += int(sums[i, 2])

    def __len__(self) -> int:
        return len(self._table)

    def counts(self) -> Dict[int, int]:
        return {key: entry[0] for key, entry in self._table.items()}

    def ranked(self) -> List[Tuple[int, int]]:
        """(key, count) pairs by count descending; ties keep first-seen order."""
        return sorted(self.counts().items(), key=lambda item: -item[1])

    def dominant(self) -> Color:
        """Grid color of the most populous bucket, or black if nothing was seen."""
        ranked = self.ranked()
        if not ranked:
            return BLACK
        return unpack_key(ranked[0][0])

    def representative(self, key: int) -> Color:
        """Floor mean of the true colors that fell into a bucket."""
        count, sum_r, sum_g, sum_b = self._table[key]
        return Color(sum_r // count, sum_g // count, sum_b // count)
