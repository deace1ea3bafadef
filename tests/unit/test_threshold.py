# File: tests/unit/test_threshold.py
# AI-SUMMARY: 采样格式常量与 dBFS 换算的单元测试。

import math

import numpy as np
import pytest

from loop_slicer.core.threshold import get_sample_format, get_supported_formats


def test_format_constants():
    u8 = get_sample_format(np.uint8)
    i16 = get_sample_format(np.int16)
    i32 = get_sample_format(np.int32)
    f32 = get_sample_format(np.float32)

    assert u8.zero_crossing() == 127 and u8.max_val() == 255
    assert i16.zero_crossing() == 0 and i16.max_val() == 32767
    assert i32.zero_crossing() == 0 and i32.max_val() == 2147483647
    assert f32.zero_crossing() == 0.0 and f32.max_val() == 1.0
    assert [fmt.name for fmt in get_supported_formats()] == ['f32', 'i16', 'i32', 'u8']


def test_lookup_by_array_and_name():
    assert get_sample_format(np.zeros(3, dtype=np.int16)).name == 'i16'
    assert get_sample_format('u8').dtype == np.dtype(np.uint8)


def test_unsupported_dtype_rejected():
    with pytest.raises(ValueError):
        get_sample_format(np.float64)


def test_to_dbfs_full_scale_and_zero():
    i16 = get_sample_format(np.int16)
    assert i16.to_dbfs(np.int16(32767)) == pytest.approx(0.0)
    assert i16.to_dbfs(np.int16(-32767)) == pytest.approx(0.0)
    assert i16.to_dbfs(np.int16(0)) == -math.inf

    f32 = get_sample_format(np.float32)
    assert f32.to_dbfs(0.5) == pytest.approx(-6.0206, abs=1e-3)
    assert f32.to_dbfs(-0.1) == pytest.approx(-20.0)


def test_to_dbfs_is_not_clamped():
    f32 = get_sample_format(np.float32)
    assert f32.to_dbfs(2.0) > 0.0


def test_u8_dbfs_ignores_zero_crossing_offset():
    u8 = get_sample_format(np.uint8)
    # 中心线 127 并不被视为静音
    assert u8.to_dbfs(np.uint8(127)) == pytest.approx(20 * math.log10(127 / 255))
    assert u8.to_dbfs(np.uint8(255)) == pytest.approx(0.0)
    assert u8.to_dbfs(np.uint8(0)) == -math.inf


def test_to_dbfs_vectorised():
    i16 = get_sample_format(np.int16)
    levels = i16.to_dbfs(np.array([0, 32767, -3277], dtype=np.int16))
    assert isinstance(levels, np.ndarray)
    assert levels[0] == -np.inf
    assert levels[1] == pytest.approx(0.0)
    assert levels[2] == pytest.approx(-20.0, abs=0.01)


def test_is_silent_and_is_zero():
    f32 = get_sample_format(np.float32)
    mask = f32.is_silent(np.array([0.0, 0.01, 0.5], dtype=np.float32), -30.0)
    assert mask.tolist() == [True, True, False]
    assert f32.is_silent(0.5, -30.0) is False

    u8 = get_sample_format(np.uint8)
    assert u8.is_zero(np.uint8(127)) is True
    assert u8.is_zero(np.uint8(0)) is False
    assert u8.is_zero(np.array([127, 128], dtype=np.uint8)).tolist() == [True, False]
