#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/utils/segment_exporter.py
# AI-SUMMARY: 片段导出：按统一命名规则逐个写出切片 WAV，返回按播放顺序排列的路径。

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence, Union

import numpy as np

from .wav_io import WavHeader, write_wav

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    output_dir: str = ''
    saved_files: List[str] = field(default_factory=list)
    segment_samples: List[int] = field(default_factory=list)


class SegmentExporter:
    """Write split buffers as ``<stem>_<index>.wav`` files."""

    def __init__(self, header: WavHeader, *, index_offset: int = 1, index_width: int = 3) -> None:
        self.header = header
        self.index_offset = index_offset
        self.index_width = index_width

    def segment_name(self, stem: str, index: int) -> str:
        return f"{stem}_{index + self.index_offset:0{self.index_width}d}.wav"

    def export_segments(
        self,
        segments: Sequence[np.ndarray],
        output_dir: Union[str, Path],
        stem: str,
    ) -> ExportResult:
        base_dir = Path(output_dir)
        base_dir.mkdir(parents=True, exist_ok=True)

        result = ExportResult(output_dir=str(base_dir))
        if not segments:
            logger.warning("nothing to export for %s", stem)
            return result

        for i, segment_audio in enumerate(segments):
            output_path = write_wav(base_dir / self.segment_name(stem, i), self.header, segment_audio)
            result.saved_files.append(str(output_path))
            result.segment_samples.append(int(len(segment_audio)))

        logger.info("wrote %d segments to %s", len(result.saved_files), base_dir)
        return result


__all__ = ['ExportResult', 'SegmentExporter']
