#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/utils/__init__.py
# AI-SUMMARY: 外围协作模块出口：WAV 编解码、片段导出与配置管理。

from .wav_io import WavHeader, read_wav, write_wav
from .segment_exporter import ExportResult, SegmentExporter
from .config_manager import ConfigManager, get_config_manager, get_config

__all__ = [
    'WavHeader',
    'read_wav',
    'write_wav',
    'ExportResult',
    'SegmentExporter',
    'ConfigManager',
    'get_config_manager',
    'get_config',
]
