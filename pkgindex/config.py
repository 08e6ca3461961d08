#!/usr/bin/env python3

import os
import sys
import json
import shutil
import platform
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import logging

from .domain.repository import Repository, resolve_repositories
from .exit_codes import ConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("pkgindex")

DEFAULT_CRAN_MIRROR = "https://cloud.r-project.org"
DEFAULT_CACHE_TTL = 3600

# Environment variables honoured for compatibility with R's own tooling
CACHE_MAX_AGE_ENV = "R_AVAILABLE_PACKAGES_CACHE_CONTROL_MAX_AGE"
COMPILE_FROM_SOURCE_ENV = "R_COMPILE_AND_INSTALL_PACKAGES"
MAKE_ENV = "MAKE"

PKG_TYPES = ("source", "binary", "both")


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. PKGINDEX_CONFIG environment variable
    2. ~/.pkgindex/ directory
    """
    if 'PKGINDEX_CONFIG' in os.environ:
        path = Path(os.environ['PKGINDEX_CONFIG'])
        if path.exists():
            return path

    config_dir = Path.home() / '.pkgindex'
    for filename in ['config.json', 'config.toml', 'config.yaml', 'config.yml']:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def load_config(config_path: Optional[Path] = None):
    """Load configuration from file, defaults and environment."""
    config_path = Path(config_path) if config_path else get_config_path()

    config = get_default_config()

    if config_path.exists():
        try:
            if config_path.suffix.lower() in ['.toml']:
                with open(config_path, 'rb') as f:
                    file_config = tomllib.load(f)
            elif config_path.suffix.lower() in ['.yaml', '.yml']:
                import yaml
                with open(config_path, 'r') as f:
                    file_config = yaml.safe_load(f) or {}
            else:
                with open(config_path, 'r') as f:
                    file_config = json.load(f)

            config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")

    config = apply_env_overrides(config)

    return config


def save_config(config, config_path: Optional[Path] = None):
    """Save configuration to file."""
    config_path = Path(config_path) if config_path else get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path, 'w') as f:
                yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        else:
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

        logger.info(f"Configuration saved to {config_path}")
    except Exception as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def get_default_config():
    """Get default configuration."""
    return {
        "repositories": {
            "CRAN": "@CRAN@",
        },
        "cran_mirror": DEFAULT_CRAN_MIRROR,
        "cache": {
            "ttl_seconds": DEFAULT_CACHE_TTL,
            "staging_dir": "",
        },
        "install": {
            "pkg_type": "",  # source, binary, both; empty = platform default
            "check_source": True,
            "compile_from_source": "",  # never, interactive, always
        },
        "platform": {
            "os": "",
            "arch": "",
            "r_version": "4.4",
        },
        "network": {
            "timeout_seconds": 10,
            "max_concurrent_fetches": 5,
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        },
    }


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key == "repositories":
            # Repository lists are replaced wholesale; order matters.
            merged[key] = dict(value) if isinstance(value, dict) else value
        elif key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def apply_env_overrides(config, environ: Optional[Mapping[str, str]] = None):
    """
    Apply environment variable overrides to configuration.
    Environment variables follow the pattern: PKGINDEX_SECTION_KEY
    For example: PKGINDEX_CACHE_TTL_SECONDS=600
    """
    env_prefix = "PKGINDEX_"
    environ = os.environ if environ is None else environ

    for env_key, value in environ.items():
        if not env_key.startswith(env_prefix) or env_key == "PKGINDEX_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        if value.lower() in ('true', 'yes', 'on'):
            typed_value = True
        elif value.lower() in ('false', 'no', 'off'):
            typed_value = False
        elif value.isdigit():
            typed_value = int(value)
        else:
            typed_value = value

        current_level = config
        i = 0
        while i < len(key_parts):
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts_from_key = config_key.lower().split('_')
                if key_parts[i : i + len(config_key_parts_from_key)] == config_key_parts_from_key:
                    if len(config_key_parts_from_key) > best_match_len:
                        best_match_len = len(config_key_parts_from_key)
                        matched_key = config_key

            if matched_key:
                if i + best_match_len == len(key_parts):
                    current_level[matched_key] = typed_value
                    break

                if isinstance(current_level[matched_key], dict):
                    current_level = current_level[matched_key]
                    i += best_match_len
                else:
                    break
            else:
                break

    return config


def detect_os() -> str:
    """Return 'windows', 'macos' or 'linux' style platform name."""
    if sys.platform.startswith('win'):
        return 'windows'
    if sys.platform == 'darwin':
        return 'macos'
    return sys.platform


def detect_toolchain(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check whether a build tool is available on this host.

    An explicitly empty MAKE disables compilation; otherwise the program
    it names (default ``make``) must be on PATH.
    """
    environ = os.environ if environ is None else environ
    make = environ.get(MAKE_ENV, "make")
    if not make.strip():
        return False
    return shutil.which(make.split()[0]) is not None


@dataclass(frozen=True)
class PlatformInfo:
    """Host description used to locate binary catalogs."""
    os: str
    arch: str
    r_version: str

    @property
    def binary_supported(self) -> bool:
        return self.os in ('windows', 'macos')


@dataclass(frozen=True)
class ResolverSettings:
    """Everything the resolver reads from configuration, resolved once."""
    repositories: Tuple[Repository, ...]
    platform: PlatformInfo
    pkg_type: str = "source"
    cache_ttl: int = DEFAULT_CACHE_TTL
    check_source: bool = True
    compile_from_source: Optional[str] = None
    toolchain_available: bool = True
    timeout_seconds: float = 10
    max_workers: int = 5
    staging_dir: Optional[Path] = None

    @property
    def pkg_types(self) -> Tuple[str, ...]:
        if self.pkg_type == "both":
            return ("binary", "source")
        return (self.pkg_type,)


def _parse_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from e


def load_settings(config: Optional[Dict[str, Any]] = None,
                  environ: Optional[Mapping[str, str]] = None) -> ResolverSettings:
    """
    Build ResolverSettings from a configuration dict.

    Args:
        config: Configuration dict (loaded from file when None)
        environ: Environment mapping (os.environ when None)

    Returns:
        Frozen ResolverSettings

    Raises:
        ConfigError: If a setting has an unusable value
    """
    environ = os.environ if environ is None else environ
    if config is None:
        config = load_config()
    defaults = get_default_config()

    repos = config.get("repositories") or {}
    if not isinstance(repos, dict):
        raise ConfigError("'repositories' must be a mapping of name to URL")
    mirror = config.get("cran_mirror") or DEFAULT_CRAN_MIRROR
    repositories = resolve_repositories(repos, mirror=mirror)

    platform_cfg = {**defaults["platform"], **config.get("platform", {})}
    host = PlatformInfo(
        os=platform_cfg.get("os") or detect_os(),
        arch=platform_cfg.get("arch") or platform.machine().lower(),
        r_version=str(platform_cfg.get("r_version") or defaults["platform"]["r_version"]),
    )

    install = {**defaults["install"], **config.get("install", {})}
    pkg_type = install.get("pkg_type") or ("both" if host.binary_supported else "source")
    if pkg_type not in PKG_TYPES:
        raise ConfigError(f"Invalid install.pkg_type: {pkg_type!r} (expected one of {', '.join(PKG_TYPES)})")

    # Explicit setting wins over the environment default
    compile_pref = install.get("compile_from_source") or environ.get(COMPILE_FROM_SOURCE_ENV) or None

    cache = {**defaults["cache"], **config.get("cache", {})}
    ttl = environ.get(CACHE_MAX_AGE_ENV) or cache.get("ttl_seconds")
    staging_dir = cache.get("staging_dir")

    network = {**defaults["network"], **config.get("network", {})}

    check_source = install.get("check_source", True)
    if isinstance(check_source, str):
        check_source = check_source.lower() in ('yes', 'true', '1', 'on')

    return ResolverSettings(
        repositories=repositories,
        platform=host,
        pkg_type=pkg_type,
        cache_ttl=_parse_int(ttl, "cache.ttl_seconds"),
        check_source=bool(check_source),
        compile_from_source=compile_pref,
        toolchain_available=detect_toolchain(environ),
        timeout_seconds=float(network.get("timeout_seconds", 10)),
        max_workers=max(1, _parse_int(network.get("max_concurrent_fetches", 5), "network.max_concurrent_fetches")),
        staging_dir=Path(staging_dir).expanduser() if staging_dir else None,
    )
