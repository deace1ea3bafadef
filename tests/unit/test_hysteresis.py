# File: tests/unit/test_hysteresis.py
# AI-SUMMARY: 迟滞分段状态机的单元测试，覆盖 predelay/hold/delay 组合与区间不变量。

import numpy as np
import pytest

from loop_slicer.core.hysteresis import (
    DEFAULT_HOLD_SAMPLES,
    HysteresisConfig,
    HysteresisSegmenter,
    skip_predicate,
    slice_ranges,
)

SPARSE = [1, 0, 0, 0, 2, 3, 4, 0, 0, 5, 6]


def _is_zero(x):
    return x == 0


def _segments(seq, **kwargs):
    segmenter = HysteresisSegmenter(HysteresisConfig(**kwargs))
    return slice_ranges(seq, segmenter.segment_by(seq, _is_zero))


def test_default_debounce_splits_on_each_silence():
    seq = [0, 0, 0, 0, 1, 0, 0, 0, 2, 3, 4, 0, 0, 5, 6]
    assert _segments(seq, predelay=0, hold=1, delay=0) == [[1], [2, 3, 4], [5, 6]]
    assert slice_ranges(seq, skip_predicate(seq, _is_zero)) == [[1], [2, 3, 4], [5, 6]]


def test_delay_keeps_first_silent_sample():
    assert _segments(SPARSE, predelay=0, hold=0, delay=1) == [[1, 0], [2, 3, 4, 0], [5, 6]]


def test_predelay_pads_onset():
    assert _segments(SPARSE, predelay=1, hold=0, delay=0) == [[1], [0, 2, 3, 4], [0, 5, 6]]


def test_hold_filters_short_spikes():
    seq = [0, 0, 9, 0, 0, 0, 7, 7, 7, 0]
    segmenter = HysteresisSegmenter(HysteresisConfig(hold=3))
    # 起音在第三个非静音样本处确认，predelay=0 时片段从确认点开始
    assert segmenter.segment_by(seq, _is_zero) == [(8, 9)]
    segmenter = HysteresisSegmenter(HysteresisConfig(hold=3, predelay=2))
    assert segmenter.segment_by(seq, _is_zero) == [(6, 9)]


def test_starting_with_sound_begins_at_zero():
    assert HysteresisSegmenter().segment([False, False, True]) == [(0, 2)]


def test_all_silent_and_empty():
    segmenter = HysteresisSegmenter()
    assert segmenter.segment([True, True, True]) == []
    assert segmenter.segment([]) == []
    assert segmenter.segment(np.array([], dtype=bool)) == []


def test_predelay_never_overlaps_previous_segment():
    seq = [5, 0, 5, 5]
    ranges = HysteresisSegmenter(HysteresisConfig(predelay=10)).segment_by(seq, _is_zero)
    assert ranges == [(0, 1), (1, 4)]


def test_consecutive_release_resets_on_sound():
    seq = [5, 0, 5, 0, 5, 0, 5]
    strict = HysteresisSegmenter(HysteresisConfig(delay=1))
    assert strict.segment_by(seq, _is_zero) == [(0, 7)]

    literal = HysteresisSegmenter(HysteresisConfig(delay=1, consecutive_release=False))
    assert literal.segment_by(seq, _is_zero) == [(0, 3), (4, 7)]


def test_default_hold_constant():
    assert DEFAULT_HOLD_SAMPLES == 16


@pytest.mark.parametrize('seed', range(5))
@pytest.mark.parametrize('config', [
    HysteresisConfig(),
    HysteresisConfig(predelay=3, hold=2, delay=4),
    HysteresisConfig(predelay=50, hold=16, delay=10, consecutive_release=False),
])
def test_ranges_are_ordered_disjoint_and_in_bounds(seed, config):
    rng = np.random.default_rng(seed)
    mask = rng.random(500) < 0.4
    ranges = HysteresisSegmenter(config).segment(mask)

    previous_end = 0
    for start, end in ranges:
        assert 0 <= previous_end <= start < end <= mask.size
        previous_end = end
    starts = [start for start, _ in ranges]
    assert starts == sorted(set(starts))


def test_slice_ranges_copies_numpy_buffers():
    buffer = np.arange(6, dtype=np.int16)
    parts = slice_ranges(buffer, [(1, 3)])
    parts[0][0] = 99
    assert buffer[1] == 1
