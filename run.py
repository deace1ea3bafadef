#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# run.py - Loop Slicer 统一运行脚本
# AI-SUMMARY: 源码树内直接运行的入口，转发到 loop_slicer.main

"""
Loop Slicer 统一运行脚本

使用方法：
    python run.py -i input/loop.wav -t 120           # 按 BPM 切分
    python run.py -i input/loop.wav -b 8             # 等分 8 段
    python run.py -i input/hits.wav -s               # 按静音切分
    python run.py --help                             # 显示帮助
"""

import sys
from pathlib import Path

# 添加 src 目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / 'src'))

from loop_slicer.main import main

if __name__ == "__main__":
    sys.exit(main())
