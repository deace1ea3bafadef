# File: tests/unit/test_split_modes.py
# AI-SUMMARY: 切分模式参数结构与三选一模式选择的校验测试。

import dataclasses

import pytest

from loop_slicer.core.split_modes import (
    BeatsMode,
    SilenceMode,
    SplitModeError,
    TempoMode,
    select_split_mode,
)


def test_defaults():
    tempo = TempoMode(tempo=120)
    assert tempo.note_value == 4
    assert not tempo.trim_leading_silence and not tempo.trim_trailing_silence

    silence = SilenceMode()
    assert (silence.attack_ms, silence.release_ms, silence.hold_samples) == (1, 750, 16)
    assert silence.attack_samples(44100) == 44
    assert silence.release_samples(44100) == 33075


def test_modes_are_immutable():
    mode = BeatsMode(beats=4)
    with pytest.raises(dataclasses.FrozenInstanceError):
        mode.beats = 8


@pytest.mark.parametrize('factory', [
    lambda: TempoMode(tempo=0),
    lambda: TempoMode(tempo=120, note_value=0),
    lambda: BeatsMode(beats=0),
    lambda: BeatsMode(beats=-3),
    lambda: SilenceMode(attack_ms=-1),
    lambda: SilenceMode(release_ms=-1),
    lambda: SilenceMode(hold_samples=0),
])
def test_out_of_range_rejected(factory):
    with pytest.raises(SplitModeError):
        factory()


def test_select_requires_exactly_one_mode():
    with pytest.raises(SplitModeError, match=r"^Must specify either tempo, beats or silence\.$"):
        select_split_mode()
    with pytest.raises(SplitModeError, match="Cannot specify both tempo and beats."):
        select_split_mode(tempo=120, beats=4)
    with pytest.raises(SplitModeError, match="Cannot combine"):
        select_split_mode(beats=4, silence=True)


def test_select_builds_each_mode():
    tempo = select_split_mode(tempo=100, note_value=8, trim_leading_silence=True, threshold_db=-50)
    assert tempo == TempoMode(tempo=100, note_value=8, trim_leading_silence=True, threshold_db=-50.0)

    assert select_split_mode(beats=16) == BeatsMode(beats=16)

    silence = select_split_mode(silence=True, attack_ms=3, release_ms=200)
    assert silence == SilenceMode(threshold_db=-30.0, attack_ms=3, release_ms=200)
    assert select_split_mode(tempo=90).threshold_db == -40.0
