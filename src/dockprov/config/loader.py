# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/dockprov/config/loader.py

import logging
import os
import yaml
from pathlib import Path

from dockprov.errors import ConfigError
from .models import ProvisionConfig

log = logging.getLogger("dockprov")

SECRETS_ENV = "DOCKPROV_SECRETS_FILE"

# Only credentials may come from a secrets file.
SECRET_FIELDS = {
    "host": ("username", "password", "pkey_path"),
    "auth": ("server_key_path",),
}


def _apply_secrets(data: dict, secrets: dict, source: Path) -> dict:
    """
    Overlay credential fields from *secrets* onto the machine config *data*
    (mutates data). Empty secret values leave the config value in place.
    """
    for section, fields in secrets.items():
        allowed = SECRET_FIELDS.get(section)
        if allowed is None or not isinstance(fields, dict):
            raise ConfigError(f"{source}: '{section}' cannot be set from a secrets file")
        for key, value in fields.items():
            if key not in allowed:
                raise ConfigError(f"{source}: '{section}.{key}' cannot be set from a secrets file")
            if value in (None, ""):
                continue
            target = data.setdefault(section, {})
            if not isinstance(target, dict):
                raise ConfigError(f"'{section}' must be a mapping to take secrets from {source}")
            target[key] = value
    return data


def _find_secrets_file(config_path: Path) -> Path | None:
    """
    Locate the secrets for a machine config:

    1. $DOCKPROV_SECRETS_FILE; it is an error if it names a missing file
    2. <config stem>.secrets.yaml, e.g. node-1.secrets.yaml for node-1.yaml
    3. secrets.yaml shared by every config in the directory
    """
    env = os.environ.get(SECRETS_ENV)
    if env:
        p = Path(env)
        if not p.is_file():
            raise ConfigError(f"{SECRETS_ENV}={env} does not exist")
        return p

    for p in (
        config_path.with_name(f"{config_path.stem}.secrets.yaml"),
        config_path.parent / "secrets.yaml",
    ):
        if p.is_file() and p.resolve() != config_path.resolve():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    try:
        raw = path.read_text()
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    expanded = os.path.expandvars(raw)
    try:
        data = yaml.safe_load(expanded) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")
    return data


def load_config(path: str | Path) -> ProvisionConfig:
    """
    Load and validate a machine provisioning config.

    ``${ENV_VAR}`` placeholders are expanded at load time. SSH credentials
    and the server key path may live in a secrets file instead (see
    SECRET_FIELDS); anything else there is rejected.
    """
    path = Path(path)
    data = _load_yaml(path)

    secrets_path = _find_secrets_file(path)
    if secrets_path:
        log.debug("Applying secrets from %s", secrets_path)
        _apply_secrets(data, _load_yaml(secrets_path), secrets_path)

    return ProvisionConfig.model_validate(data)
