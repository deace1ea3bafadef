# File: tests/conftest.py
# AI-SUMMARY: 提供 src 导入路径、slow 标记收集期跳过策略，以及生成测试 WAV 的夹具。

import logging
import os
import sys
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

# 确保可以通过包路径导入 src/
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def _env_true(name: str) -> bool:
    return os.environ.get(name, '').strip() in {'1', 'true', 'True', 'YES', 'yes'}


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup('capability toggles')
    group.addoption('--runslow', action='store_true', default=False, help='run tests marked as slow')


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line('markers', 'slow: long running test, enable with --runslow')


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_slow = config.getoption('--runslow') or _env_true('LSL_RUN_SLOW')
    skip_slow = pytest.mark.skip(reason='slow test skipped; enable with --runslow or LSL_RUN_SLOW=1')
    for item in items:
        if 'slow' in item.keywords and not run_slow:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith('LSL__') or key == 'LOOP_SLICER_CONFIG_PATH':
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_wav(tmp_path):
    """Write ``frames`` (float in [-1, 1] or int16/int32 PCM, shape (n,) or (n, ch)) as a WAV file."""

    def _make(frames: np.ndarray, sr: int = 8000, subtype: str = 'PCM_16', name: str = 'loop.wav') -> Path:
        path = tmp_path / name
        sf.write(str(path), np.asarray(frames), sr, subtype=subtype, format='WAV')
        return path

    return _make


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # CLI 测试会重建 root handler，测试结束后还原
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
