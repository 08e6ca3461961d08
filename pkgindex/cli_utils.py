"""
Common CLI utilities and decorators for consistent command behavior.
"""

import logging
import sys
import click
from functools import wraps

from .exit_codes import (
    INTERRUPTED,
    CommandError,
    ResolutionError,
    get_exit_code_for_exception,
)
from .output import emit_error


def common_options(func):
    """Add --pretty, --debug and --quiet to a command."""
    func = click.option('--pretty', is_flag=True, help='Display as a formatted table')(func)
    func = click.option('--debug', is_flag=True, help='Enable debug logging')(func)
    func = click.option('-q', '--quiet', is_flag=True, help='Suppress progress messages')(func)
    return func


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Set the pkgindex log level from flags, else from the config file."""
    logger = logging.getLogger("pkgindex")
    if debug:
        logger.setLevel(logging.DEBUG)
    elif quiet:
        logger.setLevel(logging.WARNING)
    else:
        from .config import load_config
        logging_cfg = load_config().get("logging", {})
        level = str(logging_cfg.get("level", "INFO")).upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
        if logging_cfg.get("format"):
            for handler in logging.getLogger().handlers:
                handler.setFormatter(logging.Formatter(logging_cfg["format"]))


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Logging level from --debug/--quiet
    - Errors as JSON on stderr
    - Exit codes from exit_codes
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        configure_logging(kwargs.get('debug', False), kwargs.get('quiet', False))
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            emit_error("Interrupted by user", type="interrupted")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except ResolutionError as e:
            emit_error(str(e), type=e.kind, context=e.to_dict())
            sys.exit(e.exit_code)
        except CommandError as e:
            emit_error(str(e), type=type(e).__name__)
            sys.exit(e.exit_code)
        except Exception as e:
            logging.getLogger("pkgindex").debug("Unhandled error", exc_info=True)
            emit_error(str(e), type=type(e).__name__)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def build_index():
    """Create a PackageIndex from the user's configuration."""
    from .api import PackageIndex
    from .config import load_config
    return PackageIndex(config=load_config())
