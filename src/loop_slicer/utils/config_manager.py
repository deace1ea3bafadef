#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# File: src/loop_slicer/utils/config_manager.py
# AI-SUMMARY: 配置管理器，负责加载包内默认 YAML、外部覆盖文件与环境变量，并从配置构建切分模式。

import os
import yaml
import logging
from typing import Dict, Any, Optional
from pathlib import Path

from ..core.split_modes import BeatsMode, SilenceMode, SplitMode, SplitModeError, TempoMode

logger = logging.getLogger(__name__)

_UNSET = object()

ENV_PREFIX = 'LSL__'
EXTERNAL_CONFIG_ENV = 'LOOP_SLICER_CONFIG_PATH'
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'config.yaml'


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"config file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file must contain a mapping: {path}")
    return data


def _deep_merge_dict(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    result = dict(base)
    if not override:
        return result
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge_dict(result[key], value)
        else:
            result[key] = value
    return result


def _parse_env_value(raw: str) -> Any:
    value = raw.strip()
    lower = value.lower()
    if lower in {'true', 'false'}:
        return lower == 'true'
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return raw


def _apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
    result = dict(config)
    for key, raw in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = [part.lower() for part in key[len(ENV_PREFIX):].split('__') if part]
        if not parts:
            continue
        value = _parse_env_value(raw)
        cursor = result
        for part in parts[:-1]:
            if part not in cursor or not isinstance(cursor[part], dict):
                cursor[part] = {}
            else:
                cursor[part] = dict(cursor[part])
            cursor = cursor[part]
        cursor[parts[-1]] = value
    return result


class ConfigManager:
    """Loop slicer configuration manager"""

    def __init__(self, config_path: Optional[str] = None):
        """Load and validate the configuration.

        Args:
            config_path: Extra YAML file merged over the package defaults
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.config = self._load_config()
        self._validate_config()

        logger.debug(f"config loaded from {self.config_path}")

    def _load_config(self) -> Dict[str, Any]:
        config = _load_yaml_file(DEFAULT_CONFIG_PATH)

        external_path = os.environ.get(EXTERNAL_CONFIG_ENV)
        if external_path:
            config = _deep_merge_dict(config, _load_yaml_file(Path(external_path)))

        if self.config_path.resolve() != DEFAULT_CONFIG_PATH.resolve():
            config = _deep_merge_dict(config, _load_yaml_file(self.config_path))

        return _apply_env_overrides(config)

    def _validate_config(self):
        required_sections = ['tempo', 'beats', 'silence', 'output', 'logging']

        for section in required_sections:
            if section not in self.config or not isinstance(self.config[section], dict):
                raise ValueError(f"config is missing section: {section}")

        self._validate_modes()

    def _validate_modes(self):
        # 借助模式构造函数的范围检查，tempo 取占位值 1
        try:
            self.build_mode('tempo', tempo=1)
            self.build_mode('beats')
            self.build_mode('silence')
        except SplitModeError as e:
            raise ValueError(f"invalid split defaults in config: {e}") from e

    def get(self, key_path: str, default: Any = _UNSET) -> Any:
        """Look up a dotted key such as ``'silence.release_ms'``."""
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            if default is not _UNSET:
                return default
            raise KeyError(f"config key not found: {key_path}")

    def set(self, key_path: str, value: Any):
        keys = key_path.split('.')
        config = self.config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value
        logger.debug(f"config update: {key_path} = {value}")

    def get_section(self, section: str) -> Dict[str, Any]:
        if section not in self.config:
            raise KeyError(f"config section not found: {section}")

        return self.config[section].copy()

    def save_config(self, output_path: Optional[str] = None):
        """Dump the current configuration as YAML.

        Args:
            output_path: Target file; defaults to the loaded ``config_path``
        """
        if output_path is None:
            output_path = self.config_path

        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.config, f, default_flow_style=False,
                      allow_unicode=True, indent=2)

        logger.info(f"config saved: {output_path}")

    def get_logging_config(self) -> Dict[str, Any]:
        log_config = self.get_section('logging')

        level_map = {
            'DEBUG': logging.DEBUG,
            'INFO': logging.INFO,
            'WARNING': logging.WARNING,
            'ERROR': logging.ERROR,
            'CRITICAL': logging.CRITICAL
        }

        log_config['level'] = level_map.get(str(log_config.get('level', 'INFO')).upper(), logging.INFO)
        log_config.setdefault('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        log_config.setdefault('file', None)
        return log_config

    def build_mode(self, name: str, **overrides: Any) -> SplitMode:
        """Build a split mode from its config section plus explicit overrides.

        ``None`` overrides fall back to the configured value.
        """
        overrides = {key: value for key, value in overrides.items() if value is not None}
        if name == 'tempo':
            section = self.get_section('tempo')
            if 'tempo' not in overrides and section.get('tempo') is None:
                raise SplitModeError("tempo mode needs a tempo")
            return TempoMode(
                tempo=int(overrides.get('tempo', section.get('tempo'))),
                note_value=int(overrides.get('note_value', section.get('note_value', 4))),
                trim_leading_silence=bool(overrides.get(
                    'trim_leading_silence', section.get('trim_leading_silence', False))),
                trim_trailing_silence=bool(overrides.get(
                    'trim_trailing_silence', section.get('trim_trailing_silence', False))),
                threshold_db=float(overrides.get('threshold_db', section.get('threshold_db', -40.0))),
            )
        if name == 'beats':
            section = self.get_section('beats')
            return BeatsMode(beats=int(overrides.get('beats', section.get('count', 4))))
        if name == 'silence':
            section = self.get_section('silence')
            return SilenceMode(
                threshold_db=float(overrides.get('threshold_db', section.get('threshold_db', -30.0))),
                attack_ms=int(overrides.get('attack_ms', section.get('attack_ms', 1))),
                release_ms=int(overrides.get('release_ms', section.get('release_ms', 750))),
                hold_samples=int(overrides.get('hold_samples', section.get('hold_samples', 16))),
            )
        raise SplitModeError(f"unknown split mode: {name}")

    def __str__(self) -> str:
        return f"ConfigManager(config_path={self.config_path})"

    def __repr__(self) -> str:
        return self.__str__()


# 全局配置管理器实例
_config_manager = None


def get_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """Return the process-wide :class:`ConfigManager`, creating it on first use."""
    global _config_manager

    if _config_manager is None:
        _config_manager = ConfigManager(config_path)

    return _config_manager


def get_config(key_path: str, default: Any = _UNSET) -> Any:
    return get_config_manager().get(key_path, default)


def set_runtime_config(config_overrides: Dict[str, Any]):
    """Apply dotted-key overrides to the global configuration.

    Args:
        config_overrides: Mapping of ``'section.key'`` to value
    """
    config_manager = get_config_manager()

    for key_path, value in config_overrides.items():
        config_manager.set(key_path, value)

    logger.info(f"applied {len(config_overrides)} runtime config overrides")


def reset_runtime_config():
    """Drop the global instance so the next access reloads from disk."""
    global _config_manager
    _config_manager = None
