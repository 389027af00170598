"""Layered configuration for the search helpers.

Values resolve in this order, first hit wins:

1. Environment variables (``ENV_MAPPINGS``)
2. ``system_config.json`` (or the file passed in)
3. ``_DEFAULTS`` below

Credentials never come from the file: ``SECRET_MAPPINGS`` names the only
environment variables they are read from.
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_LIMIT_PER_OBJECT,
    DEFAULT_SEARCH_OBJECTS,
    DEFAULT_SEARCH_SCOPE,
)

_DEFAULTS: Dict[str, Any] = {
    "logging": {
        "external_logs_dir": "logs",
    },
    "salesforce": {
        "domain": "login",
        "api_version": None,
        "default_search_scope": DEFAULT_SEARCH_SCOPE,
        "default_limit_per_object": DEFAULT_LIMIT_PER_OBJECT,
        "default_object_types": list(DEFAULT_SEARCH_OBJECTS),
    },
}

# Logging imports config, so the logger is resolved on first use
_logger = None


def _log():
    global _logger
    if _logger is None:
        from ..logging import get_smart_logger
        _logger = get_smart_logger("config")
    return _logger


class ConfigError(Exception):
    """Missing or invalid secret."""
    pass


def _merged(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merged(result[key], value)
        else:
            result[key] = value
    return result


def _parse_env(raw: str) -> Any:
    """``"true"`` -> True, ``"20"`` -> 20, ``"59.0"`` -> 59.0, else the string."""
    lowered = raw.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


class UnifiedConfig:
    """Configuration snapshot taken at construction time."""

    SECRET_MAPPINGS = {
        'salesforce_user': 'SFDC_USER',
        'salesforce_pass': 'SFDC_PASS',
        'salesforce_token': 'SFDC_TOKEN',
    }

    ENV_MAPPINGS = {
        'LOG_DIR': 'logging.external_logs_dir',
        'SFDC_DOMAIN': 'salesforce.domain',
        'SFDC_API_VERSION': 'salesforce.api_version',
        'SOSL_DEFAULT_SCOPE': 'salesforce.default_search_scope',
        'SOSL_DEFAULT_LIMIT': 'salesforce.default_limit_per_object',
    }

    def __init__(self, config_file: str = DEFAULT_CONFIG_FILE):
        self._config_file = config_file
        self._config = _merged(_DEFAULTS, self._read_file(Path(config_file)))
        self._secrets = {
            key: os.environ[env_var]
            for key, env_var in self.SECRET_MAPPINGS.items()
            if os.environ.get(env_var)
        }
        overridden = self._apply_env()

        _log().info("unified_config_loaded",
                    config_file=config_file,
                    env_overrides=overridden,
                    secrets_loaded=sorted(self._secrets))

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            _log().debug("config_file_not_found", path=str(path))
            return {}

        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            _log().error("config_file_load_error",
                         path=str(path),
                         error=str(e),
                         using_defaults=True)
            return {}
        if not isinstance(data, dict):
            _log().error("config_file_load_error",
                         path=str(path),
                         error="top-level value is not a JSON object",
                         using_defaults=True)
            return {}
        return data

    def _apply_env(self) -> List[str]:
        overridden = []
        for env_var, dotted in self.ENV_MAPPINGS.items():
            raw = os.environ.get(env_var)
            if raw is None:
                continue
            *parents, leaf = dotted.split('.')
            section = self._config
            for name in parents:
                section = section.setdefault(name, {})
            section[leaf] = _parse_env(raw)
            overridden.append(env_var)
        return overridden

    def get(self, path: str, default: Any = None) -> Any:
        """Look up a dotted path such as ``salesforce.domain``."""
        node: Any = self._config
        for name in path.split('.'):
            if not isinstance(node, dict) or name not in node:
                return default
            node = node[name]
        return node

    def get_secret(self, key: str, required: bool = True) -> Optional[str]:
        """Secret from the environment; ``ConfigError`` if required and unset."""
        value = self._secrets.get(key)
        if value is None and required:
            raise ConfigError(
                f"Required secret '{key}' not found in environment variables "
                f"(set {self.SECRET_MAPPINGS.get(key, key)})"
            )
        return value

    @property
    def log_dir(self) -> str:
        return str(self.get('logging.external_logs_dir', 'logs'))

    @property
    def salesforce_domain(self) -> str:
        return self.get('salesforce.domain', 'login')

    @property
    def salesforce_api_version(self) -> Optional[str]:
        """API version as simple_salesforce expects it, e.g. ``"60.0"``."""
        version = self.get('salesforce.api_version')
        if version is None:
            return None
        if isinstance(version, (int, float)) and not isinstance(version, bool):
            return f"{float(version):.1f}"
        return str(version)

    @property
    def default_search_scope(self) -> str:
        return self.get('salesforce.default_search_scope', DEFAULT_SEARCH_SCOPE)

    @property
    def default_limit_per_object(self) -> int:
        return int(self.get('salesforce.default_limit_per_object', DEFAULT_LIMIT_PER_OBJECT))

    @property
    def default_object_types(self) -> List[str]:
        return list(self.get('salesforce.default_object_types', DEFAULT_SEARCH_OBJECTS))


config = UnifiedConfig()
