#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/core/hysteresis.py
# AI-SUMMARY: 带迟滞的静音/有声状态机，把逐样本静音判定转换为互不重叠的有声片段区间。

"""Hysteresis segmentation over a per-sample silence classification.

The segmenter walks a boolean stream (``True`` = silent) and reports the
sound regions as half-open ``(start, end)`` index pairs. Three knobs shape
the boundaries:

* ``predelay`` – samples kept in front of a detected onset so the attack
  transient is not clipped by detection latency.
* ``hold`` – consecutive non-silent samples needed to confirm an onset.
* ``delay`` – silent samples, beyond the first, needed to confirm an offset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# 静音模式下确认起音所需的连续非静音样本数
DEFAULT_HOLD_SAMPLES = 16

SegmentRange = Tuple[int, int]


class SegmenterState(Enum):
    SKIPPING = 'skipping'
    TAKING = 'taking'


@dataclass(frozen=True)
class HysteresisConfig:
    """Debounce parameters for :class:`HysteresisSegmenter`.

    ``consecutive_release`` resets the offset counter whenever a non-silent
    sample shows up inside a sound region, so only an unbroken run of silence
    ends the segment. With it disabled, scattered silent samples accumulate
    until ``delay`` is exceeded.
    """

    predelay: int = 0
    hold: int = 1
    delay: int = 0
    consecutive_release: bool = True


class HysteresisSegmenter:
    """Turn a silence mask into ordered, non-overlapping sound ranges."""

    def __init__(self, config: HysteresisConfig | None = None) -> None:
        self.config = config or HysteresisConfig()
        self._predelay = max(0, int(self.config.predelay))
        self._hold = max(0, int(self.config.hold))
        self._delay = max(0, int(self.config.delay))

    def segment(self, silent: Iterable[bool]) -> List[SegmentRange]:
        """Return ``(start, end)`` ranges of the sound regions in ``silent``."""

        if isinstance(silent, np.ndarray):
            flags = silent.astype(bool).ravel().tolist()
        else:
            flags = [bool(flag) for flag in silent]
        if not flags:
            return []

        ranges: List[SegmentRange] = []
        state = SegmenterState.SKIPPING if flags[0] else SegmenterState.TAKING
        start = 0
        floor = 0
        misses = 0
        onset = 0

        for idx, is_silent in enumerate(flags):
            if state is SegmenterState.SKIPPING:
                if is_silent:
                    misses = 0
                    continue
                misses += 1
                if misses >= self._hold:
                    start = max(floor, idx - self._predelay)
                    onset = 0
                    state = SegmenterState.TAKING
            else:
                if not is_silent:
                    if self.config.consecutive_release:
                        onset = 0
                    continue
                onset += 1
                if onset > self._delay:
                    ranges.append((start, idx))
                    floor = idx
                    misses = 0
                    state = SegmenterState.SKIPPING

        if state is SegmenterState.TAKING:
            ranges.append((start, len(flags)))

        logger.debug(
            "hysteresis: %d samples -> %d segments (predelay=%d hold=%d delay=%d)",
            len(flags), len(ranges), self._predelay, self._hold, self._delay,
        )
        return ranges

    def segment_by(self, seq: Sequence, predicate: Callable[[object], bool]) -> List[SegmentRange]:
        """Classify ``seq`` element by element with ``predicate`` then segment."""
        return self.segment(predicate(item) for item in seq)


def skip_predicate(seq: Sequence, predicate: Callable[[object], bool]) -> List[SegmentRange]:
    """Split on every silent sample: no predelay, single-sample hold, no delay."""
    return HysteresisSegmenter(HysteresisConfig(predelay=0, hold=1, delay=0)).segment_by(seq, predicate)


def slice_ranges(seq: Sequence, ranges: Iterable[SegmentRange]) -> list:
    """Materialise ``ranges`` as independent copies of ``seq``'s elements."""
    out = []
    for start, end in ranges:
        part = seq[start:end]
        out.append(part.copy() if hasattr(part, 'copy') else list(part))
    return out


__all__ = [
    'DEFAULT_HOLD_SAMPLES',
    'SegmentRange',
    'SegmenterState',
    'HysteresisConfig',
    'HysteresisSegmenter',
    'skip_predicate',
    'slice_ranges',
]
