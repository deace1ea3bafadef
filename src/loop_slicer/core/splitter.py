#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/core/splitter.py
# AI-SUMMARY: 切分模式分发器：按采样格式解析能力后，调用 Tempo/Beats/Silence 策略生成片段区间并输出独立缓冲。

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

import numpy as np

from .hysteresis import HysteresisConfig, HysteresisSegmenter, SegmentRange, slice_ranges
from .slice_ops import skip_from_right_while, skip_while
from .split_modes import BeatsMode, SilenceMode, SplitMode, TempoMode
from .threshold import SampleFormat, get_sample_format

logger = logging.getLogger(__name__)


@dataclass
class SplitContext:
    """Data shared by every split strategy.

    Attributes:
        samples: Interleaved 1-D sample buffer (read only)
        sample_rate: Samples per second from the header
        sample_format: Capability resolved from the buffer dtype
        channels: Interleaved channels per frame; planned ranges start and end on frame boundaries
    """
    samples: np.ndarray
    sample_rate: int
    sample_format: SampleFormat
    channels: int = 1


class SplitStrategy(ABC):
    """Base class for the per-mode segment planners."""

    def __init__(self, mode: SplitMode) -> None:
        self.mode = mode

    @abstractmethod
    def plan(self, context: SplitContext) -> List[SegmentRange]:
        """Return the half-open ranges of ``context.samples`` to keep."""

    @property
    def name(self) -> str:
        return self.mode.name


class TempoStrategy(SplitStrategy):
    mode: TempoMode

    def plan(self, context: SplitContext) -> List[SegmentRange]:
        mode = self.mode
        segment_len = mode.segment_length(context.sample_rate) * context.channels
        if segment_len <= 0:
            raise ValueError(
                f"tempo {mode.tempo} with note value {mode.note_value} gives an empty segment "
                f"at {context.sample_rate} Hz"
            )

        fmt = context.sample_format
        threshold = mode.threshold_db

        def _never(_sample: Any) -> bool:
            return False

        def _silent(sample: Any) -> bool:
            return fmt.is_silent(sample, threshold)

        samples = context.samples
        leading = skip_while(samples, _silent if mode.trim_leading_silence else _never)
        kept = skip_from_right_while(leading, _silent if mode.trim_trailing_silence else _never)
        if len(kept) == 0:
            return []
        # 裁剪点扩展到整帧，避免切开声道
        first = len(samples) - len(leading)
        start = _frame_floor(first, context.channels)
        end = min(_frame_ceil(first + len(kept), context.channels), len(samples))
        if start or end != len(samples):
            logger.debug("tempo trim kept samples [%d, %d) of %d", start, end, len(samples))

        return [(pos, min(pos + segment_len, end)) for pos in range(start, end, segment_len)]


class BeatsStrategy(SplitStrategy):
    mode: BeatsMode

    def plan(self, context: SplitContext) -> List[SegmentRange]:
        total = len(context.samples)
        beats = self.mode.beats
        # 按帧等分，余下的帧并入最后一段
        segment_len = (total // context.channels // beats) * context.channels
        ranges = [(i * segment_len, (i + 1) * segment_len) for i in range(beats - 1)]
        ranges.append(((beats - 1) * segment_len, total))
        return ranges


class SilenceStrategy(SplitStrategy):
    mode: SilenceMode

    def plan(self, context: SplitContext) -> List[SegmentRange]:
        mode = self.mode
        config = HysteresisConfig(
            predelay=mode.attack_samples(context.sample_rate),
            hold=mode.hold_samples,
            delay=mode.release_samples(context.sample_rate),
        )
        silent = context.sample_format.is_silent(context.samples, mode.threshold_db)
        ranges = HysteresisSegmenter(config).segment(silent)
        return _align_to_frames(ranges, context.channels, len(context.samples))


def _frame_floor(index: int, channels: int) -> int:
    return index - index % channels


def _frame_ceil(index: int, channels: int) -> int:
    return -(-index // channels) * channels


def _align_to_frames(ranges: List[SegmentRange], channels: int, total: int) -> List[SegmentRange]:
    """Widen ``ranges`` to whole frames without letting neighbours overlap."""
    if channels <= 1:
        return ranges
    aligned: List[SegmentRange] = []
    floor = 0
    for start, end in ranges:
        start = max(_frame_floor(start, channels), floor)
        end = min(_frame_ceil(end, channels), total)
        if start < end:
            aligned.append((start, end))
            floor = end
    return aligned


_STRATEGIES: Dict[type, Type[SplitStrategy]] = {
    TempoMode: TempoStrategy,
    BeatsMode: BeatsStrategy,
    SilenceMode: SilenceStrategy,
}


def get_strategy(mode: SplitMode) -> SplitStrategy:
    try:
        strategy_cls = _STRATEGIES[type(mode)]
    except KeyError:
        raise ValueError(f"unknown split mode: {mode!r}") from None
    return strategy_cls(mode)


def plan_segments(
    samples: np.ndarray,
    sample_rate: int,
    mode: SplitMode,
    channels: int = 1,
) -> List[SegmentRange]:
    """Return the ``(start, end)`` ranges ``mode`` keeps from ``samples``.

    With ``channels > 1`` the buffer is read as interleaved frames: Tempo and
    Beats lengths count frames and every boundary falls between frames.

    An empty buffer plans a single empty range so callers always get at
    least one output.
    """
    if samples is None or len(samples) == 0:
        return [(0, 0)]
    buffer = np.asarray(samples)
    context = SplitContext(
        samples=buffer,
        sample_rate=int(sample_rate),
        sample_format=get_sample_format(buffer.dtype),
        channels=max(1, int(channels)),
    )
    strategy = get_strategy(mode)
    ranges = strategy.plan(context)
    logger.debug("%s strategy planned %d segments", strategy.name, len(ranges))
    return ranges


def split_audio(
    samples: Optional[np.ndarray],
    header: Any,
    mode: SplitMode,
) -> Tuple[Any, List[np.ndarray]]:
    """Split ``samples`` according to ``mode``.

    Args:
        samples: Decoded interleaved buffer, or ``None`` when there is no data
        header: Object exposing ``sample_rate`` (and optionally ``channels``); returned unchanged
        mode: One of :class:`TempoMode`, :class:`BeatsMode`, :class:`SilenceMode`

    Returns:
        ``(header, buffers)`` with buffers in playback order, each an
        independent copy in the input dtype.
    """
    if samples is None or len(samples) == 0:
        dtype = samples.dtype if samples is not None else _header_dtype(header)
        logger.info("no audio data, emitting a single empty segment")
        return header, [np.empty(0, dtype=dtype)]

    buffer = np.asarray(samples)
    ranges = plan_segments(buffer, header.sample_rate, mode, getattr(header, 'channels', 1))
    buffers = slice_ranges(buffer, ranges)
    logger.info("%s split produced %d segments from %d samples", mode.name, len(buffers), len(buffer))
    return header, buffers


def _header_dtype(header: Any) -> np.dtype:
    sample_format = getattr(header, 'sample_format', None)
    if sample_format:
        return get_sample_format(sample_format).dtype
    return np.dtype(np.float32)


__all__ = [
    'SplitContext',
    'SplitStrategy',
    'TempoStrategy',
    'BeatsStrategy',
    'SilenceStrategy',
    'get_strategy',
    'plan_segments',
    'split_audio',
]
