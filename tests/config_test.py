import sys
import os
import json
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from core.config import DEFAULT_CONFIG, DetectorConfig, config_from_dict, load_config
from core.errors import ConfigError

def test_defaults():
    assert DEFAULT_CONFIG.style_suffixes == ('.module.scss', '.module.css')
    assert DEFAULT_CONFIG.namespace_identifiers == ('styles',)
    assert DEFAULT_CONFIG.max_workers is None

def test_style_suffix_for():
    config = DetectorConfig(style_suffixes=('.scss', '.module.scss'))
    assert config.style_suffix_for('a/Card.module.scss') == '.module.scss'
    assert config.style_suffix_for('a/Card.css') is None
    assert config.style_suffix_for('.module.scss') is None

def test_overrides():
    config = config_from_dict({'markup_suffixes': ['.tsx'], 'namespace_identifiers': 'css', 'max_workers': 3})
    assert config.markup_suffixes == ('.tsx',)
    assert config.namespace_identifiers == ('css',)
    assert config.max_workers == 3
    assert config.style_suffixes == DEFAULT_CONFIG.style_suffixes

@pytest.mark.parametrize('data', [
    {'unknown': True},
    {'markup_suffixes': [1]},
    {'markup_suffixes': ['']},
    {'style_suffixes': []},
    {'markup_suffixes': []},
    {'resolve_style_imports': 'yes'},
    {'max_workers': 0},
    {'max_workers': True},
    ['not', 'an', 'object'],
])
def test_invalid_overrides(data):
    with pytest.raises(ConfigError):
        config_from_dict(data)

def test_load_config(tmp_path):
    path = tmp_path / 'detector.json'
    path.write_text(json.dumps({'style_suffixes': ['.module.less']}), encoding='utf-8')
    assert load_config(path).style_suffixes == ('.module.less',)

def test_load_config_errors(tmp_path):
    bad = tmp_path / 'bad.json'
    bad.write_text('{not json', encoding='utf-8')
    with pytest.raises(ConfigError):
        load_config(bad)
    with pytest.raises(ConfigError):
        load_config(tmp_path / 'missing.json')
