#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# loop_slicer/__init__.py
# AI-SUMMARY: 包初始化 - 暴露切分引擎与文件级 API
"""
Loop Slicer
===========

把录制好的循环乐句切成独立的小片段，支持三种策略：
- tempo: 按 BPM 与音符时值的固定网格切分
- beats: 按固定段数等分
- silence: 按静音间隙检测切分

典型用法::

    from loop_slicer import TempoMode, slice_file

    slice_file(input_uri='loop.wav', export_dir='slices', mode=TempoMode(tempo=120))
"""

__version__ = "0.3.0"
__description__ = "Loop slicer - tempo, beat and silence based sample chopping"

from .core import (
    BeatsMode,
    SilenceMode,
    SplitModeError,
    TempoMode,
    plan_segments,
    select_split_mode,
    split_audio,
)
from .api import slice_file

__all__ = [
    'BeatsMode',
    'SilenceMode',
    'SplitModeError',
    'TempoMode',
    'plan_segments',
    'select_split_mode',
    'split_audio',
    'slice_file',
]
