#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/main.py
# AI-SUMMARY: 命令行入口：解析切分参数、配置日志、调用 slice_file 并打印导出结果。

import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional

from loop_slicer.api import slice_file
from loop_slicer.core.split_modes import SplitModeError, select_split_mode
from loop_slicer.utils.config_manager import ConfigManager

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='loop-slicer',
        description='Slice a recorded loop into beat slices or one-shots',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  python -m loop_slicer.main -i loop.wav -t 120               # quarter notes at 120 BPM
  python -m loop_slicer.main -i loop.wav -t 90 -n 8 --trim-leading
  python -m loop_slicer.main -i loop.wav -b 16                # 16 equal slices
  python -m loop_slicer.main -i hits.wav -s --threshold -35   # one-shots split on silence
        """
    )

    parser.add_argument('-i', '--input', required=True, help='path of the loop to slice')
    parser.add_argument('-o', '--output', default=None, help='output directory')
    parser.add_argument('-c', '--config', default=None, help='YAML config merged over the defaults')

    # 切分模式（三选一）
    parser.add_argument('-t', '--tempo', type=int, default=None, help='tempo of the loop, in BPM')
    parser.add_argument('-b', '--beats', type=int, default=None,
                        help='number of segments of equal size to split the loop into')
    parser.add_argument('-s', '--silence', action='store_true', help='split on silence gaps')

    # 模式参数
    parser.add_argument('-n', '--note-value', type=int, default=None,
                        help='note value of one slice in tempo mode (4 = quarter note)')
    parser.add_argument('--trim-leading', action='store_true', default=None,
                        help='trim leading silence before slicing by tempo')
    parser.add_argument('--trim-trailing', action='store_true', default=None,
                        help='trim trailing silence before slicing by tempo')
    parser.add_argument('--threshold', type=float, default=None, help='silence threshold in dBFS')
    parser.add_argument('--attack', type=int, default=None, help='attack padding in ms (silence mode)')
    parser.add_argument('--release', type=int, default=None, help='release hold in ms (silence mode)')
    parser.add_argument('--hold', type=int, default=None,
                        help='non-silent samples required to start a segment (silence mode)')

    parser.add_argument('--manifest', action='store_true', help='write a JSON manifest next to the slices')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    return parser


def setup_logging(log_config: dict, verbose: bool = False) -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_config.get('file'):
        handlers.append(logging.FileHandler(log_config['file'], encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if verbose else log_config['level'],
        format=log_config['format'],
        handlers=handlers,
    )


def _error(message: str) -> int:
    print(f"ERR: {message}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigManager(args.config)
    except (OSError, ValueError) as e:
        return _error(str(e))
    try:
        setup_logging(config.get_logging_config(), args.verbose)
    except OSError as e:
        return _error(f"cannot open log file: {e}")

    try:
        # 先校验三选一，再用配置补齐缺省参数
        selected = select_split_mode(tempo=args.tempo, beats=args.beats, silence=args.silence)
        mode = config.build_mode(
            selected.name,
            tempo=args.tempo,
            beats=args.beats,
            note_value=args.note_value,
            trim_leading_silence=args.trim_leading,
            trim_trailing_silence=args.trim_trailing,
            threshold_db=args.threshold,
            attack_ms=args.attack,
            release_ms=args.release,
            hold_samples=args.hold,
        )
    except SplitModeError as e:
        return _error(str(e))

    input_path = Path(args.input)
    if not input_path.is_file():
        return _error(f"input file does not exist: {input_path}")

    try:
        manifest = slice_file(
            input_uri=str(input_path),
            export_dir=args.output or config.get('output.directory', None),
            mode=mode,
            index_offset=int(config.get('output.index_offset', 1)),
            index_width=int(config.get('output.index_width', 3)),
            export_manifest=args.manifest or bool(config.get('output.manifest', False)),
            manifest_filename=config.get('output.manifest_filename', 'SliceManifest.json'),
        )
    except (OSError, RuntimeError, ValueError) as e:
        logger.debug("slicing failed", exc_info=True)
        return _error(str(e))

    segments = manifest['segments']
    print(f"{len(segments)} segments -> {manifest['artifacts']['output_dir']}")
    for segment in segments:
        print(f"  {segment.get('path')}  {segment['start']:.3f}s - {segment['end']:.3f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
