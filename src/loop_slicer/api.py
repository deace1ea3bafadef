#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/api.py
# AI-SUMMARY: 对外统一 API：读取 WAV、按模式切分、导出片段并生成标准化 Manifest。

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .core.hysteresis import SegmentRange, slice_ranges
from .core.split_modes import SplitMode
from .core.splitter import plan_segments
from .utils.segment_exporter import ExportResult, SegmentExporter
from .utils.wav_io import WavHeader, read_wav

logger = logging.getLogger(__name__)


def slice_file(
    *,
    input_uri: str,
    export_dir: Optional[str],
    mode: SplitMode,
    stem: Optional[str] = None,
    index_offset: int = 1,
    index_width: int = 3,
    export_manifest: bool = False,
    manifest_filename: str = 'SliceManifest.json',
) -> Dict[str, Any]:
    """
    Slice one WAV file and write each segment next to the others.

    Args:
        input_uri: Path of the loop to slice.
        export_dir: Output directory; defaults to ``<input stem>_slices`` beside the input.
        mode: A ``TempoMode``, ``BeatsMode`` or ``SilenceMode``.
        stem: File name prefix for the slices, defaults to the input stem.
        index_offset: Number given to the first slice.
        index_width: Zero padding of the slice number.
        export_manifest: Whether to write the manifest as JSON into ``export_dir``.
        manifest_filename: Manifest file name inside ``export_dir``.

    Returns:
        Manifest dictionary describing the job and every written slice.
    """

    input_path = Path(input_uri).expanduser().resolve()
    if not input_path.exists():
        raise FileNotFoundError(f"input audio not found: {input_path}")

    if export_dir:
        export_path = Path(export_dir).expanduser().resolve()
    else:
        export_path = input_path.parent / f"{input_path.stem}_slices"

    header, samples = read_wav(input_path)
    ranges = plan_segments(samples, header.sample_rate, mode, header.channels)
    buffers = slice_ranges(samples, ranges)

    exporter = SegmentExporter(header, index_offset=index_offset, index_width=index_width)
    export = exporter.export_segments(buffers, export_path, stem or input_path.stem)

    manifest = _build_manifest(
        input_path=input_path,
        export_dir=export_path,
        header=header,
        num_samples=int(len(samples)),
        mode=mode,
        ranges=ranges,
        export=export,
    )

    if export_manifest:
        manifest_path = export_path / manifest_filename
        with manifest_path.open('w', encoding='utf-8') as fh:
            json.dump(manifest, fh, ensure_ascii=False, indent=2)
        manifest['manifest_path'] = manifest_path.as_posix()

    return manifest


def _build_manifest(
    *,
    input_path: Path,
    export_dir: Path,
    header: WavHeader,
    num_samples: int,
    mode: SplitMode,
    ranges: Sequence[SegmentRange],
    export: ExportResult,
) -> Dict[str, Any]:
    return {
        'job': {'source': input_path.as_posix()},
        'audio': {
            'sr': header.sample_rate,
            'channels': header.channels,
            'subtype': header.subtype,
            'samples': num_samples,
            'duration': header.duration_s(num_samples),
            'hash': f"sha256:{_compute_sha256(input_path)}",
        },
        'mode': {'name': mode.name, **asdict(mode)},
        'segments': _build_segments(header, ranges, export, export_dir),
        'artifacts': {'output_dir': export_dir.as_posix()},
        'stats': {'num_segments': len(export.saved_files)},
    }


def _build_segments(
    header: WavHeader,
    ranges: Sequence[SegmentRange],
    export: ExportResult,
    export_dir: Path,
) -> List[Dict[str, Any]]:
    segments: List[Dict[str, Any]] = []
    for idx, (start, end) in enumerate(ranges):
        entry: Dict[str, Any] = {
            'id': f"{idx + 1:04d}",
            'start_sample': int(start),
            'end_sample': int(end),
            'start': header.duration_s(start),
            'end': header.duration_s(end),
            'duration': header.duration_s(end - start),
        }
        if idx < len(export.saved_files):
            entry['path'] = _to_relative_path(export.saved_files[idx], export_dir)
        segments.append(entry)
    return segments


def _compute_sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open('rb') as fh:
        for chunk in iter(lambda: fh.read(1024 * 1024), b''):
            digest.update(chunk)
    return digest.hexdigest()


def _to_relative_path(path_value: Any, base_dir: Path) -> Optional[str]:
    if not path_value:
        return None
    path = Path(str(path_value))
    try:
        return path.resolve().relative_to(base_dir).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ['slice_file']
