#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/core/split_modes.py
# AI-SUMMARY: 三种切分模式（Tempo/Beats/Silence）的不可变参数结构与模式选择校验。

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from .hysteresis import DEFAULT_HOLD_SAMPLES


class SplitModeError(ValueError):
    """Raised when split options are missing, conflicting or out of range."""


def _require_positive(name: str, value) -> None:
    if value is None or value <= 0:
        raise SplitModeError(f"{name} must be positive, got {value!r}")


def _require_non_negative(name: str, value) -> None:
    if value is None or value < 0:
        raise SplitModeError(f"{name} must not be negative, got {value!r}")


@dataclass(frozen=True)
class TempoMode:
    """Fixed grid: one segment per ``note_value`` note at ``tempo`` BPM."""

    name: ClassVar[str] = 'tempo'

    tempo: int
    note_value: int = 4
    trim_leading_silence: bool = False
    trim_trailing_silence: bool = False
    threshold_db: float = -40.0

    def __post_init__(self) -> None:
        _require_positive('tempo', self.tempo)
        _require_positive('note_value', self.note_value)

    def segment_length(self, sample_rate: int) -> int:
        # 240 = 60 s/min * 4，note_value=4 即四分音符
        return int(sample_rate * 240 // (self.tempo * self.note_value))


@dataclass(frozen=True)
class BeatsMode:
    """Equal split into ``beats`` segments, the last absorbing the remainder."""

    name: ClassVar[str] = 'beats'

    beats: int

    def __post_init__(self) -> None:
        _require_positive('beats', self.beats)


@dataclass(frozen=True)
class SilenceMode:
    """Split on silence gaps detected with the hysteresis segmenter."""

    name: ClassVar[str] = 'silence'

    threshold_db: float = -30.0
    attack_ms: int = 1
    release_ms: int = 750
    hold_samples: int = DEFAULT_HOLD_SAMPLES

    def __post_init__(self) -> None:
        _require_non_negative('attack_ms', self.attack_ms)
        _require_non_negative('release_ms', self.release_ms)
        _require_positive('hold_samples', self.hold_samples)

    def attack_samples(self, sample_rate: int) -> int:
        return int(sample_rate * self.attack_ms // 1000)

    def release_samples(self, sample_rate: int) -> int:
        return int(sample_rate * self.release_ms // 1000)


SplitMode = Union[TempoMode, BeatsMode, SilenceMode]


def select_split_mode(
    *,
    tempo: Optional[int] = None,
    beats: Optional[int] = None,
    silence: bool = False,
    note_value: int = 4,
    trim_leading_silence: bool = False,
    trim_trailing_silence: bool = False,
    threshold_db: Optional[float] = None,
    attack_ms: int = 1,
    release_ms: int = 750,
    hold_samples: int = DEFAULT_HOLD_SAMPLES,
) -> SplitMode:
    """Build exactly one split mode from loosely specified options."""

    chosen = [label for label, active in (
        ('tempo', tempo is not None),
        ('beats', beats is not None),
        ('silence', bool(silence)),
    ) if active]

    if not chosen:
        raise SplitModeError("Must specify either tempo, beats or silence.")
    if len(chosen) > 1:
        if chosen == ['tempo', 'beats']:
            raise SplitModeError("Cannot specify both tempo and beats.")
        raise SplitModeError(f"Cannot combine split modes: {', '.join(chosen)}.")

    if tempo is not None:
        return TempoMode(
            tempo=tempo,
            note_value=note_value,
            trim_leading_silence=trim_leading_silence,
            trim_trailing_silence=trim_trailing_silence,
            threshold_db=-40.0 if threshold_db is None else float(threshold_db),
        )
    if beats is not None:
        return BeatsMode(beats=beats)
    return SilenceMode(
        threshold_db=-30.0 if threshold_db is None else float(threshold_db),
        attack_ms=attack_ms,
        release_ms=release_ms,
        hold_samples=hold_samples,
    )


__all__ = [
    'SplitModeError',
    'TempoMode',
    'BeatsMode',
    'SilenceMode',
    'SplitMode',
    'select_split_mode',
]
