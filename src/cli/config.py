"""Settings file loading and validation.

Settings come from four layers, later ones winning:

1. Defaults (Settings dataclass)
2. Optional YAML settings file (.visio-link-checker.yaml by default)
3. Environment variables, including a .env file loaded with python-dotenv
4. Command-line options (applied by the CLI)

Settings file structure (every field optional):
    max_workers: 8
    timeout: 15
    user_agent: "Mozilla/5.0 ..."
    rules_file: LinkUpdates.csv
    extension: .vsdx
    follow_redirects: false
"""

import os
from dataclasses import replace
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .errors import ConfigError, ConfigFilesystemError
from .models import Settings

ENV_PREFIX = "VISIO_LINK_CHECKER_"


class SettingsLoader:
    """Handles settings file loading and validation.

    A missing settings file is normal and yields the defaults. An empty file
    is treated the same way.

    Example:
        >>> settings = SettingsLoader.load(".visio-link-checker.yaml")
        >>> settings.max_workers
        8
    """

    DEFAULT_SETTINGS_FILE = '.visio-link-checker.yaml'

    # field name -> accepted Python types
    FIELD_TYPES = {
        'max_workers': (int,),
        'timeout': (int, float),
        'user_agent': (str,),
        'rules_file': (str,),
        'extension': (str,),
        'follow_redirects': (bool,),
    }

    # Environment variable suffix -> field name
    ENV_FIELDS = {
        'MAX_WORKERS': 'max_workers',
        'TIMEOUT': 'timeout',
        'USER_AGENT': 'user_agent',
    }

    @classmethod
    def load(cls, settings_path: Optional[str] = None, use_env: bool = True) -> Settings:
        """Load settings from a YAML file and the environment.

        Args:
            settings_path: Path to the YAML settings file (default location if None)
            use_env: Apply VISIO_LINK_CHECKER_* environment overrides

        Returns:
            Validated Settings object

        Raises:
            ConfigFilesystemError: If the file exists but cannot be read
            ConfigError: If the file or an override is invalid
        """
        settings_path = settings_path or cls.DEFAULT_SETTINGS_FILE
        settings = cls._load_file(settings_path)

        if use_env:
            settings = cls._apply_env(settings)

        return settings

    @classmethod
    def _load_file(cls, settings_path: str) -> Settings:
        try:
            with open(settings_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            return Settings()
        except PermissionError:
            raise ConfigFilesystemError(
                settings_path,
                'read',
                'Permission denied'
            )
        except Exception as e:
            raise ConfigFilesystemError(
                settings_path,
                'read',
                str(e)
            )

        if not content.strip():
            return Settings()

        try:
            settings_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if settings_dict is None:
            return Settings()

        if not isinstance(settings_dict, dict):
            raise ConfigError(
                f"Settings must be a YAML dictionary, got {type(settings_dict).__name__}"
            )

        return cls._parse_settings(settings_dict)

    @classmethod
    def _parse_settings(cls, settings_dict: Dict[str, Any]) -> Settings:
        """Parse and validate a settings dictionary.

        Raises:
            ConfigError: If a field is unknown or has the wrong type/value
        """
        unknown = set(settings_dict) - set(cls.FIELD_TYPES)
        if unknown:
            raise ConfigError(
                f"Unknown field(s): {', '.join(sorted(unknown))}"
            )

        values = {}
        for name, value in settings_dict.items():
            accepted = cls.FIELD_TYPES[name]
            # bool is an int subclass; only accept it where bool is expected
            if isinstance(value, bool) and bool not in accepted:
                valid = False
            else:
                valid = isinstance(value, accepted)
            if not valid:
                raise ConfigError(
                    f"must be {' or '.join(t.__name__ for t in accepted)}, got {type(value).__name__}",
                    name
                )
            values[name] = value

        settings = replace(Settings(), **values)
        cls.validate(settings)
        return settings

    @classmethod
    def _apply_env(cls, settings: Settings) -> Settings:
        load_dotenv()

        overrides: Dict[str, Any] = {}
        for suffix, name in cls.ENV_FIELDS.items():
            raw = os.getenv(ENV_PREFIX + suffix)
            if raw is None or not raw.strip():
                continue
            try:
                if name == 'max_workers':
                    overrides[name] = int(raw)
                elif name == 'timeout':
                    overrides[name] = float(raw)
                else:
                    overrides[name] = raw.strip()
            except ValueError:
                raise ConfigError(
                    f"invalid value {raw!r} in {ENV_PREFIX + suffix}",
                    name
                )

        if not overrides:
            return settings

        settings = replace(settings, **overrides)
        cls.validate(settings)
        return settings

    @classmethod
    def validate(cls, settings: Settings) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If a value is out of range
        """
        if settings.max_workers < 1:
            raise ConfigError("must be at least 1", 'max_workers')
        if settings.timeout <= 0:
            raise ConfigError("must be greater than 0", 'timeout')
        if not settings.user_agent.strip():
            raise ConfigError("cannot be empty", 'user_agent')
        if not settings.rules_file.strip():
            raise ConfigError("cannot be empty", 'rules_file')
        if not settings.extension.startswith('.'):
            raise ConfigError("must start with '.'", 'extension')
