"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Minimal configs only need: project, inbound (width + target), model.path
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from rdfserving.config.settings import (
    InboundConfig,
    LoggingConfig,
    ModelConfig,
    ServerConfig,
    ServingConfig,
)


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return _process_config_values(data) if data else {}


def load_config(
    config_path: Path,
    base_path: Path | None = None,
) -> ServingConfig:
    """
    Load serving configuration from YAML file(s).

    Minimal config requires only:
        - project: str
        - inbound.column_names or inbound.num_columns
        - inbound.target_column
        - model.path

    Args:
        config_path: Path to the main configuration file.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated ServingConfig instance.
    """
    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        # Try to find base.yaml in same directory
        potential_base = config_path.parent / "base.yaml"
        if potential_base.exists() and potential_base != config_path:
            base_data = load_yaml(potential_base)
        else:
            base_data = {}

    main_data = load_yaml(config_path)
    merged = _deep_merge(base_data, main_data)

    project = merged.get("project")
    if not project:
        msg = "Config must specify 'project' name"
        raise ValueError(msg)

    inbound_data = merged.get("inbound")
    if not inbound_data:
        msg = "Config must specify an 'inbound' section"
        raise ValueError(msg)
    if inbound_data.get("target_column") is None:
        msg = "Config must specify 'inbound.target_column'"
        raise ValueError(msg)
    inbound = InboundConfig(**inbound_data)

    model_data = merged.get("model", {})
    model_path = model_data.get("path")
    if not model_path:
        msg = "Config must specify 'model.path'"
        raise ValueError(msg)
    model = ModelConfig(
        path=str(model_path),
        categories=Path(model_data["categories"])
        if model_data.get("categories")
        else None,
    )

    server_data = merged.get("server", {})
    server = ServerConfig(
        host=server_data.get("host", "127.0.0.1"),
        port=int(server_data.get("port", 8091)),
        context_path=server_data.get("context_path", ""),
    )

    logging_data = merged.get("logging", {})
    logging = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=bool(logging_data.get("json_output", False)),
    )

    return ServingConfig(
        project=project,
        inbound=inbound,
        model=model,
        server=server,
        logging=logging,
    )
