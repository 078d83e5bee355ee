"""
Configuration loading
Reads config/receipt_config.yaml, falls back to built-in defaults and
applies environment overrides on top.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from loguru import logger


DEFAULT_URL_TEMPLATE = "https://transactioninfo.ethiotelecom.et/receipt/{tx}"
DEFAULT_FETCH_TIMEOUT_MS = 30000

# env var -> (section, key, type)
_ENV_OVERRIDES = {
    "RECEIPT_URL_TEMPLATE":     ("receipt", "url_template", str),
    "RECEIPT_FETCH_TIMEOUT_MS": ("receipt", "fetch_timeout_ms", int),
    "HOST":                     ("server", "host", str),
    "PORT":                     ("server", "port", int),
    "LOG_LEVEL":                ("logging", "level", str),
    "APP_ENV":                  ("server", "environment", str),
}


def default_config() -> Dict:
    """Return default configuration"""
    return {
        'receipt': {
            'url_template': DEFAULT_URL_TEMPLATE,
            'fetch_timeout_ms': DEFAULT_FETCH_TIMEOUT_MS,
        },
        'browser': {
            'headless': True,
            'launch_timeout_ms': 30000,
            'body_wait_ms': 5000,
            'args': [
                '--no-sandbox',
                '--disable-setuid-sandbox',
                '--disable-dev-shm-usage',
                '--disable-accelerated-2d-canvas',
                '--disable-gpu',
            ],
            'viewport': {'width': 1920, 'height': 1080},
            'user_agent': (
                'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
                '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
            ),
            'extra_headers': {
                'Accept-Language': 'en-US,en;q=0.9',
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
            },
        },
        'server': {
            'host': '0.0.0.0',
            'port': 3000,
            'environment': 'development',
        },
        'logging': {
            'level': 'INFO',
            'file': 'logs/receipt_verifier.log',
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env(config: Dict, environ) -> Dict:
    for env_name, (section, key, cast) in _ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == '':
            continue
        try:
            config.setdefault(section, {})[key] = cast(raw)
        except ValueError:
            logger.warning(f"Ignoring {env_name}={raw!r}: not a valid {cast.__name__}")
    return config


def load_config(config_path: Optional[str] = None, environ=None) -> Dict:
    """
    Load configuration from YAML file

    Args:
        config_path: Path to YAML file (default: config/receipt_config.yaml)
        environ: Mapping used for overrides (default: os.environ)

    Returns:
        Configuration dictionary
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent / "config" / "receipt_config.yaml"
    if environ is None:
        environ = os.environ

    config = default_config()
    if os.path.exists(config_path):
        with open(config_path, 'r', encoding='utf-8') as f:
            config = _deep_merge(config, yaml.safe_load(f) or {})
    else:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    return _apply_env(config, environ)
