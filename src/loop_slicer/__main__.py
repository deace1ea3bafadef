# -*- coding: utf-8 -*-
# File: src/loop_slicer/__main__.py
# AI-SUMMARY: 支持 python -m loop_slicer 调用命令行入口。

import sys

from loop_slicer.main import main

sys.exit(main())
