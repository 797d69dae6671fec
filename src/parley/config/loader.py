"""Config loader for YAML configuration files."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from parley.config.models import ParleyConfig
from parley.core.errors import ConfigError


class ConfigLoader:
    """Load ParleyConfig from YAML files."""

    @staticmethod
    def load(path: Path | str) -> ParleyConfig:
        """Load configuration from a YAML file or a directory of YAML files.

        A directory is read through ``parley.yaml`` when present; otherwise all
        ``*.yaml`` files are merged in name order (abilities and settings are
        merged, other top-level keys are overwritten).

        Args:
            path: Path to config directory or parley.yaml file

        Returns:
            Parsed ParleyConfig instance

        Raises:
            ConfigError: If no file is found or the content is invalid
        """
        config_path = Path(path)
        data: dict[str, Any] = {"abilities": {}, "settings": {}}

        if config_path.is_dir():
            yaml_file = config_path / "parley.yaml"
            if yaml_file.exists():
                data = _read_yaml(yaml_file)
            else:
                files = sorted(config_path.glob("*.yaml"))
                if not files:
                    raise ConfigError(f"No config files found in {config_path}")

                for fpath in files:
                    chunk = _read_yaml(fpath)
                    if isinstance(chunk.get("abilities"), dict):
                        data["abilities"].update(chunk["abilities"])
                    if isinstance(chunk.get("settings"), dict):
                        data["settings"].update(chunk["settings"])
                    for k, v in chunk.items():
                        if k not in ("abilities", "settings"):
                            data[k] = v
        else:
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
            data = _read_yaml(config_path)

        try:
            return ParleyConfig.model_validate(data)
        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Invalid config in {config_path}: {e}") from e


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping")
    return data
