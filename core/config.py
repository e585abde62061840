"""
Detector Configuration Module
Naming conventions and tuning knobs for the unused class detector.
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Tuple, Union

from .errors import ConfigError


@dataclass(frozen=True)
class DetectorConfig:
    style_suffixes: Tuple[str, ...] = ('.module.scss', '.module.css')
    markup_suffixes: Tuple[str, ...] = ('.tsx', '.jsx')
    namespace_identifiers: Tuple[str, ...] = ('styles',)
    class_attributes: Tuple[str, ...] = ('className', 'class')
    resolve_style_imports: bool = True
    max_workers: Optional[int] = None

    def style_suffix_for(self, path: Union[str, Path]) -> Optional[str]:
        """Return the style-module suffix ``path`` ends with, longest first."""
        name = Path(path).name
        for suffix in sorted(self.style_suffixes, key=len, reverse=True):
            if name.endswith(suffix) and len(name) > len(suffix):
                return suffix
        return None


DEFAULT_CONFIG = DetectorConfig()

_TUPLE_FIELDS = {'style_suffixes', 'markup_suffixes', 'namespace_identifiers', 'class_attributes'}


def config_from_dict(data: dict, base: DetectorConfig = DEFAULT_CONFIG) -> DetectorConfig:
    """Override ``base`` with the keys of ``data``."""
    if not isinstance(data, dict):
        raise ConfigError('Configuration must be a JSON object')
    known = {f.name for f in fields(DetectorConfig)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    overrides = {}
    for key, value in data.items():
        if key in _TUPLE_FIELDS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not value or not all(isinstance(v, str) and v for v in value):
                raise ConfigError(f'{key} must be a non-empty list of non-empty strings')
            overrides[key] = tuple(value)
        elif key == 'resolve_style_imports':
            if not isinstance(value, bool):
                raise ConfigError('resolve_style_imports must be true or false')
            overrides[key] = value
        elif key == 'max_workers':
            if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 1):
                raise ConfigError('max_workers must be a positive integer or null')
            overrides[key] = value
    return replace(base, **overrides)


def load_config(path: Union[str, Path]) -> DetectorConfig:
    """Read a JSON configuration file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f'Invalid JSON in {path}: {e}') from e
    except OSError as e:
        raise ConfigError(f'Cannot read configuration file {path}: {e}') from e
    return config_from_dict(data)
