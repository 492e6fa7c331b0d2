from __future__ import annotations
import os
import pathlib
import typing as t
import yaml

from sqlbatch.constants import CONFIG_FILE, DEFAULT_ENCODING, DEFAULT_SEPARATOR

_DEFAULT_PATH = pathlib.Path(CONFIG_FILE)


class ConfigError(RuntimeError):
    """Raised for any user‑visible configuration problem."""


def _expand(value: t.Any) -> str:
    # Allow `${ENV_VAR}` syntax, same as secrets in the dbtool config
    raw = "" if value is None else str(value)
    if raw.startswith("${") and raw.endswith("}"):
        return os.getenv(raw[2:-1], "")
    return raw


class Profile:
    """
    A thin value‑object holding the settings used to split scripts for one
    server dialect.  Nothing here reads a script.
    """

    def __init__(self, name: str, d: dict[str, t.Any]) -> None:
        self.name: str = name
        self.separator: str = _expand(d.get("separator", DEFAULT_SEPARATOR))
        self.encoding: str = d.get("encoding", DEFAULT_ENCODING)
        self.statements: bool = bool(d.get("statements", False))

        if any(ch.isspace() for ch in self.separator):
            raise ConfigError(
                f"Profile {name!r}: separator {self.separator!r} must be a single word"
            )

    def __repr__(self) -> str:
        return f"Profile({self.name!r}, separator={self.separator!r})"


def load(path: pathlib.Path | str | None = None, profile: str | None = None) -> Profile:
    """
    Parse *path* (or the default YAML) and return a :class:`Profile`.

    Without an explicit *path* a missing default file is not an error: the
    built‑in defaults (``GO`` separator, UTF‑8) are returned.
    """
    cfg_file = pathlib.Path(path) if path else _DEFAULT_PATH
    if not cfg_file.exists():
        if path:
            raise ConfigError(f"Config file {cfg_file} not found.")
        if profile:
            raise ConfigError(f"Profile {profile!r} requested but {cfg_file} does not exist")
        return Profile("default", {})

    with cfg_file.open(encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{cfg_file} must contain a mapping")

    profile_name = profile or raw.get("default_profile")
    if not profile_name:
        raise ConfigError("No profile specified and no default_profile in config")

    try:
        settings = raw["profiles"][profile_name] or {}
    except (KeyError, TypeError) as exc:
        raise ConfigError(f"Profile {profile_name!r} not found in config") from exc
    if not isinstance(settings, dict):
        raise ConfigError(f"Profile {profile_name!r} must be a mapping")
    return Profile(profile_name, settings)
