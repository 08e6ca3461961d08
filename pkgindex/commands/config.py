"""
Handles the 'config' command group.
"""

import json

import click

from ..cli_utils import standard_command
from ..config import get_config_path, get_default_config, load_config, load_settings, save_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Indent the JSON output")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.option("--resolved", is_flag=True,
              help="Show the settings the resolver will use (mirror applied, platform detected)")
@standard_command
def show_config(pretty, path, resolved):
    """Show the effective configuration.

    Defaults, the config file and PKGINDEX_* environment overrides are
    merged. With --resolved, the derived resolver settings are shown
    instead: repositories with @CRAN@ replaced, the distribution types
    that will be queried and whether a build toolchain was found.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config()
    if resolved:
        settings = load_settings(config)
        config = {
            "repositories": [repo.to_dict() for repo in settings.repositories],
            "platform": {
                "os": settings.platform.os,
                "arch": settings.platform.arch,
                "r_version": settings.platform.r_version,
            },
            "pkg_types": list(settings.pkg_types),
            "cache_ttl": settings.cache_ttl,
            "check_source": settings.check_source,
            "compile_from_source": settings.compile_from_source,
            "toolchain_available": settings.toolchain_available,
        }

    print(json.dumps(config, indent=2 if pretty else None, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_config(force):
    """Write a default config file to the active config path."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        raise click.ClickException(f"{config_path} already exists (use --force to overwrite)")
    save_config(get_default_config(), config_path)
    click.echo(str(config_path))
