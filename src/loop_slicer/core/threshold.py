#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/core/threshold.py
# AI-SUMMARY: 定义四种采样数值格式的零点/满幅常量与 dBFS 换算，供静音判定统一调用。

"""Sample representation capabilities used for silence classification.

Each supported numpy dtype maps to one :class:`SampleFormat` describing the
representation's zero crossing, its full-scale magnitude and the dBFS
conversion derived from the two. The segmentation code looks the format up
once per buffer and never branches on the dtype again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Union

import numpy as np

SampleLike = Union[int, float, np.number, np.ndarray]


@dataclass(frozen=True)
class SampleFormat:
    """Representation-level constants for one sample dtype."""

    name: str
    dtype: np.dtype
    zero: float
    full_scale: float
    subtype: str

    def zero_crossing(self) -> float:
        return self.zero

    def max_val(self) -> float:
        return self.full_scale

    def is_zero(self, sample: SampleLike):
        if isinstance(sample, np.ndarray):
            return sample == self.zero
        return bool(sample == self.zero)

    def to_dbfs(self, sample: SampleLike):
        """Return the level of ``sample`` in dB relative to full scale.

        Works element-wise on arrays. An exact zero yields ``-inf``; the
        zero-crossing offset is not subtracted, so for ``uint8`` the value is
        measured from 0 rather than from the 127 centre line.
        """
        magnitude = np.abs(np.asarray(sample, dtype=np.float64))
        with np.errstate(divide='ignore'):
            level = 20.0 * np.log10(magnitude / float(self.full_scale))
        if np.ndim(level) == 0:
            return float(level)
        return level

    def is_silent(self, sample: SampleLike, threshold_db: float):
        """``True`` where ``to_dbfs(sample) <= threshold_db``."""
        result = self.to_dbfs(sample) <= float(threshold_db)
        if isinstance(result, np.ndarray):
            return result
        return bool(result)


_FORMATS: Dict[np.dtype, SampleFormat] = {}


def register_format(sample_format: SampleFormat) -> None:
    key = np.dtype(sample_format.dtype)
    if key in _FORMATS:
        raise ValueError(f"sample format already registered: {sample_format.name}")
    _FORMATS[key] = sample_format


def get_sample_format(dtype) -> SampleFormat:
    """Resolve the :class:`SampleFormat` for a dtype, array or format name."""
    if isinstance(dtype, np.ndarray):
        dtype = dtype.dtype
    if isinstance(dtype, str):
        for fmt in _FORMATS.values():
            if fmt.name == dtype:
                return fmt
    try:
        key = np.dtype(dtype)
    except TypeError as exc:
        raise ValueError(f"unsupported sample representation: {dtype!r}") from exc
    if key not in _FORMATS:
        raise ValueError(f"unsupported sample representation: {key}")
    return _FORMATS[key]


def get_supported_formats() -> List[SampleFormat]:
    return sorted(_FORMATS.values(), key=lambda fmt: fmt.name)


# 8-bit WAV 以 127 为中心线，满幅按 255 计算
register_format(SampleFormat('u8', np.dtype(np.uint8), 127, 255.0, 'PCM_U8'))
register_format(SampleFormat('i16', np.dtype(np.int16), 0, float(np.iinfo(np.int16).max), 'PCM_16'))
register_format(SampleFormat('i32', np.dtype(np.int32), 0, float(np.iinfo(np.int32).max), 'PCM_32'))
register_format(SampleFormat('f32', np.dtype(np.float32), 0.0, 1.0, 'FLOAT'))


__all__ = [
    'SampleFormat',
    'register_format',
    'get_sample_format',
    'get_supported_formats',
]
