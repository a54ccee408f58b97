"""
Configuration management for semicolon-cli.

Handles loading and managing configuration from files and environment
variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .core.classifier import TerminatorPolicy


logger = logging.getLogger(__name__)

TRUE_VALUES = ('true', '1', 'yes', 'on')

_ENV_SWITCHES = {
    'insert': 'insert_missing',
    'remove': 'remove_redundant',
    'parallel': 'parallel',
}


def _coerce_bool(value: Any) -> bool:
    """Read a switch that may come from YAML as a quoted string."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


@dataclass
class SemicolonConfig:
    """Main configuration for semicolon-cli."""

    # Policy for exports wrapping a declaration shape the classifier does not know
    ambiguous_export_policy: TerminatorPolicy = TerminatorPolicy.REQUIRED

    # Planner switches
    insert_missing: bool = True
    remove_redundant: bool = True
    parallel: bool = False

    log_level: str = "WARNING"

    # File extensions picked up when a directory is given
    extensions: List[str] = field(default_factory=lambda: ['.js', '.mjs', '.cjs'])


class ConfigManager:
    """Manages semicolon-cli configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = config_dir or Path.home() / '.semicolon-cli'
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[SemicolonConfig] = None

    def load_config(self) -> SemicolonConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        # Start with defaults
        config = SemicolonConfig()

        # Load from file if it exists
        if self.config_file.exists():
            file_config = self._load_from_file()
            config = self._merge_configs(config, file_config)

        # Override with environment variables
        env_config = self._load_from_env()
        config = self._merge_configs(config, env_config)

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return {}

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        policy = os.getenv('SEMICOLON_CLI_AMBIGUOUS_EXPORT')
        if policy:
            env_config['ambiguous_export_policy'] = policy

        for key in ('insert', 'remove', 'parallel'):
            value = os.getenv(f'SEMICOLON_CLI_{key.upper()}')
            if value:
                env_config[_ENV_SWITCHES[key]] = value.lower() in TRUE_VALUES

        log_level = os.getenv('SEMICOLON_CLI_LOG_LEVEL')
        if log_level:
            env_config['log_level'] = log_level.upper()

        return env_config

    def _merge_configs(self, base: SemicolonConfig, override: Dict[str, Any]) -> SemicolonConfig:
        """Merge a configuration dictionary into a config object."""
        if 'ambiguous_export_policy' in override:
            policy = override['ambiguous_export_policy']
            if isinstance(policy, TerminatorPolicy):
                base.ambiguous_export_policy = policy
            else:
                try:
                    base.ambiguous_export_policy = TerminatorPolicy(str(policy).lower())
                except ValueError:
                    logger.warning(f"Ignoring unknown ambiguous export policy: {policy}")

        for key in ('insert_missing', 'remove_redundant', 'parallel'):
            if key in override:
                setattr(base, key, _coerce_bool(override[key]))

        if 'log_level' in override:
            base.log_level = str(override['log_level']).upper()

        if 'extensions' in override:
            extensions = override['extensions']
            if isinstance(extensions, str):
                extensions = [extensions]
            base.extensions = [ext if ext.startswith('.') else f'.{ext}' for ext in map(str, extensions)]

        return base

    def save_config(self, config: SemicolonConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'ambiguous_export_policy': config.ambiguous_export_policy.value,
            'insert_missing': config.insert_missing,
            'remove_redundant': config.remove_redundant,
            'parallel': config.parallel,
            'log_level': config.log_level,
            'extensions': config.extensions,
        }

        with open(self.config_file, 'w') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)
        self._config = config

    def create_default_config(self) -> None:
        """Create a default configuration file."""
        self.save_config(SemicolonConfig())
        logger.info(f"Created default configuration at {self.config_file}")

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'ambiguous_export_policy': config.ambiguous_export_policy.value,
            'insert_missing': config.insert_missing,
            'remove_redundant': config.remove_redundant,
            'parallel': config.parallel,
            'log_level': config.log_level,
            'extensions': config.extensions,
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def load_config() -> SemicolonConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
