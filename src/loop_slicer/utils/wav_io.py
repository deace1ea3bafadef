#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/utils/wav_io.py
# AI-SUMMARY: 基于 soundfile 的 WAV 读写，保持原始采样格式（u8/i16/i32/f32），并把多声道展开为交织的一维序列。

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple, Union

import numpy as np
import soundfile as sf

from ..core.threshold import get_sample_format

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# subtype -> (soundfile 读取 dtype, 采样格式名, 位深)
_SUBTYPES: Dict[str, Tuple[str, str, int]] = {
    'PCM_U8': ('int16', 'u8', 8),
    'PCM_16': ('int16', 'i16', 16),
    'PCM_24': ('int32', 'i32', 24),
    'PCM_32': ('int32', 'i32', 32),
    'FLOAT': ('float32', 'f32', 32),
}


@dataclass(frozen=True)
class WavHeader:
    """Stream parameters carried unchanged from the input to every slice."""

    sample_rate: int
    channels: int
    bits_per_sample: int
    subtype: str
    sample_format: str

    @property
    def dtype(self) -> np.dtype:
        return get_sample_format(self.sample_format).dtype

    def duration_s(self, num_samples: int) -> float:
        frames = num_samples / float(max(1, self.channels))
        return frames / float(self.sample_rate)


def read_wav(path: PathLike) -> Tuple[WavHeader, np.ndarray]:
    """Decode ``path`` into a header and an interleaved 1-D sample array."""

    path = Path(path)
    info = sf.info(str(path))
    if info.subtype not in _SUBTYPES:
        raise ValueError(f"unsupported WAV subtype {info.subtype} in {path}")
    read_dtype, format_name, bits = _SUBTYPES[info.subtype]

    data, sample_rate = sf.read(str(path), dtype=read_dtype, always_2d=True)
    if info.subtype == 'PCM_U8':
        # soundfile 把 8-bit 放大到 int16，还原为无符号中心 128 的原始字节
        data = ((data >> 8) + 128).astype(np.uint8)

    samples = np.ascontiguousarray(data).reshape(-1)
    header = WavHeader(
        sample_rate=int(sample_rate),
        channels=int(info.channels),
        bits_per_sample=bits,
        subtype=info.subtype,
        sample_format=format_name,
    )
    logger.info(
        "loaded %s: %d Hz, %d ch, %s, %.2fs",
        path.name, header.sample_rate, header.channels, header.subtype,
        header.duration_s(samples.size),
    )
    return header, samples


def write_wav(path: PathLike, header: WavHeader, samples: np.ndarray) -> Path:
    """Encode ``samples`` with the stream parameters from ``header``."""

    path = Path(path)
    array = np.asarray(samples)
    if array.dtype != header.dtype:
        raise ValueError(f"sample dtype {array.dtype} does not match header format {header.sample_format}")

    channels = max(1, int(header.channels))
    remainder = array.size % channels
    if remainder:
        logger.warning("%s: dropping %d samples of an incomplete trailing frame", path.name, remainder)
        array = array[: array.size - remainder]

    if header.sample_format == 'u8':
        array = (array.astype(np.int16) - 128) << 8

    frames = array.reshape(-1, channels)
    sf.write(str(path), frames, header.sample_rate, subtype=header.subtype, format='WAV')
    return path


__all__ = ['WavHeader', 'read_wav', 'write_wav']
