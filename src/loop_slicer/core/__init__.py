#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/core/__init__.py
# AI-SUMMARY: 切分引擎核心出口：采样格式能力、序列裁剪、迟滞分段与模式分发。

"""Sample segmentation engine."""

from .threshold import SampleFormat, get_sample_format, get_supported_formats
from .slice_ops import skip_while, skip_from_right_while, take_until, take_while
from .hysteresis import (
    DEFAULT_HOLD_SAMPLES,
    HysteresisConfig,
    HysteresisSegmenter,
    skip_predicate,
)
from .split_modes import (
    SplitModeError,
    TempoMode,
    BeatsMode,
    SilenceMode,
    select_split_mode,
)
from .splitter import plan_segments, split_audio

__all__ = [
    'SampleFormat',
    'get_sample_format',
    'get_supported_formats',
    'skip_while',
    'skip_from_right_while',
    'take_until',
    'take_while',
    'DEFAULT_HOLD_SAMPLES',
    'HysteresisConfig',
    'HysteresisSegmenter',
    'skip_predicate',
    'SplitModeError',
    'TempoMode',
    'BeatsMode',
    'SilenceMode',
    'select_split_mode',
    'plan_segments',
    'split_audio',
]
