#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/core/slice_ops.py
# AI-SUMMARY: 与采样格式无关的序列裁剪工具：按谓词跳过前缀/后缀、截取前缀。

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

S = TypeVar('S', bound=Sequence)
Predicate = Callable[[object], bool]


def skip_while(seq: S, predicate: Predicate) -> S:
    """Drop the leading run of elements matching ``predicate``.

    Returns the suffix starting at the first element for which the predicate
    is false, or an empty slice when it holds for every element.
    """
    for i in range(len(seq)):
        if not predicate(seq[i]):
            return seq[i:]
    return seq[len(seq):]


def skip_from_right_while(seq: S, predicate: Predicate) -> S:
    """Mirror of :func:`skip_while` working from the end of ``seq``."""
    for i in range(len(seq) - 1, -1, -1):
        if not predicate(seq[i]):
            return seq[: i + 1]
    return seq[:0]


def take_until(seq: S, predicate: Predicate) -> S:
    """Prefix strictly before the first element matching ``predicate``."""
    for i in range(len(seq)):
        if predicate(seq[i]):
            return seq[:i]
    return seq


def take_while(seq: S, predicate: Predicate) -> S:
    """Longest prefix whose elements all match ``predicate``."""
    for i in range(len(seq)):
        if not predicate(seq[i]):
            return seq[:i]
    return seq


__all__ = ['skip_while', 'skip_from_right_while', 'take_until', 'take_while']
