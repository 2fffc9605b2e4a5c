"""
CLI entry point for image-pull using Click.

This module provides the ``image-pull`` command, which resolves the pull
policy from defaults, the configuration file and command line options, and
dispatches to the verb handlers.
"""

import errno
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

import click

from .._version import __version__
from ..exceptions import InvalidInputError, PullError
from ..models.context import PullContext
from ..services.policy_resolver import PolicyResolver
from ..utils import setup_logging
from ..utils.config_manager import ConfigManager
from ..utils.constants import CONFIG_SECTION, DEFAULT_KEYRING, EXIT_GENERAL_ERROR, EXIT_USER_INTERRUPT
from ..utils.error_handling import handle_generic_error
from .pull import VERBS
from .verbs import Verb, dispatch_verb

# ctx.meta key holding policy options in command line order
OPTIONS_META_KEY = "image_pull.options"

# Config keys that are not policy options
CONFIG_ONLY_KEYS = ("keyring", "search_paths")


# ============================================================================
# Option Handling
# ============================================================================


def _record_option(ctx: click.Context, param: click.Parameter, value: Any) -> Any:
    """Remember a given policy option in the order it was processed."""
    if value is not None and value is not False:
        ctx.meta.setdefault(OPTIONS_META_KEY, []).append((param.name, value))
    return value


def load_config(config: Optional[str]) -> Tuple[List[Tuple[str, Any]], Dict[str, Any]]:
    """
    Load the ``[pull]`` section of the configuration file.

    Args:
        config: Explicit config file path, or None for the default location

    Returns:
        Tuple of (policy options in file order, remaining settings)

    Raises:
        InvalidInputError: If the file is missing (when explicit) or malformed
    """
    manager = ConfigManager(config)
    try:
        section = manager.get_section(CONFIG_SECTION)
    except (FileNotFoundError, ValueError) as e:
        raise InvalidInputError(str(e)) from e

    options = [(key, value) for key, value in section.items() if key not in CONFIG_ONLY_KEYS]
    search_paths = manager.get(f"{CONFIG_SECTION}.search_paths")
    if search_paths is not None and (
        not isinstance(search_paths, list) or not all(isinstance(p, str) for p in search_paths)
    ):
        raise InvalidInputError(f"Invalid search_paths in [{CONFIG_SECTION}]: {search_paths!r}")

    keyring = manager.get(f"{CONFIG_SECTION}.keyring")
    if keyring is not None and not isinstance(keyring, str):
        raise InvalidInputError(f"Invalid keyring in [{CONFIG_SECTION}]: {keyring!r}")

    settings: Dict[str, Any] = {}
    if keyring is not None:
        settings["keyring"] = keyring
    if search_paths is not None:
        settings["search_paths"] = search_paths
    return options, settings


class PullCommand(click.Command):
    """Click command whose usage errors exit with EINVAL."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = errno.EINVAL
            raise


# ============================================================================
# CLI Command
# ============================================================================


@click.command(cls=PullCommand, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="image-pull")
@click.option("--force", is_flag=True, callback=_record_option, help="Replace an existing image of the same name")
@click.option(
    "--image-root",
    metavar="PATH",
    callback=_record_option,
    help="Directory to store images in (default: /var/lib/machines)",
)
@click.option(
    "--verify",
    metavar="MODE",
    callback=_record_option,
    help="Verify downloaded images: no, checksum or signature (default: signature)",
)
@click.option("--settings", metavar="BOOL", callback=_record_option, help="Download the .nspawn settings file")
@click.option("--roothash", metavar="BOOL", callback=_record_option, help="Download the .roothash file (raw only)")
@click.option(
    "--roothash-signature",
    metavar="BOOL",
    callback=_record_option,
    help="Download the .roothash.p7s signature file (raw only)",
)
@click.option("--verity", metavar="BOOL", callback=_record_option, help="Download the .verity data file (raw only)")
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to config file (default: ~/.config/image-pull/pull.toml)",
)
@click.option(
    "-d",
    "--debug",
    count=True,
    help="Increase verbosity (use -d for INFO, -dd for DEBUG, -ddd for DEBUG with HTTP logs)",
)
@click.argument("argv", nargs=-1)
@click.pass_context
def cli(  # pylint: disable=too-many-positional-arguments,unused-argument
    ctx: click.Context,
    force: bool,
    image_root: Optional[str],
    verify: Optional[str],
    settings: Optional[str],
    roothash: Optional[str],
    roothash_signature: Optional[str],
    verity: Optional[str],
    config: Optional[str],
    debug: int,
    argv: Tuple[str, ...],
) -> None:
    """Download container and virtual machine images.

    \b
    Commands:
      tar URL [NAME]   Download a tarball image
      raw URL [NAME]   Download a raw disk image
      help             Show this help
    """
    setup_logging(debug, use_wrapping=True)

    try:
        code = run(ctx, config, debug, list(argv), VERBS)
    except PullError as e:
        logging.error("%s", e)
        code = e.exit_code
    except Exception as e:  # pylint: disable=broad-except
        handle_generic_error(e, "image pull")
        code = EXIT_GENERAL_ERROR

    ctx.exit(code)


def run(ctx: click.Context, config: Optional[str], debug: int, argv: List[str], verbs: List[Verb]) -> int:
    """
    Resolve the pull policy and dispatch the verb.

    Policy options are folded in precedence order: built-in defaults, the
    ``[pull]`` config section, then command line options as given.

    Returns:
        Exit status of the verb handler
    """
    config_options, config_settings = load_config(config)
    cli_options: List[Tuple[str, Any]] = ctx.meta.get(OPTIONS_META_KEY, [])

    resolver = PolicyResolver()
    policy = resolver.resolve(config_options)
    policy = resolver.resolve(cli_options, base=policy)
    logging.debug("Resolved pull policy: %s", policy)

    context = PullContext(
        policy=policy,
        help_text=ctx.get_help(),
        keyring=config_settings.get("keyring", DEFAULT_KEYRING),
        search_paths=config_settings.get("search_paths"),
        debug=debug,
    )
    return dispatch_verb(argv, verbs, context)


# ============================================================================
# Main Entry Point
# ============================================================================


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    try:
        code = cli.main(args=argv, prog_name="image-pull", standalone_mode=False)
    except (KeyboardInterrupt, click.exceptions.Abort):
        click.echo("\n\nOperation cancelled by user", err=True)
        sys.exit(EXIT_USER_INTERRUPT)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)

    sys.exit(code or 0)


__all__ = ["cli", "main", "run", "load_config", "PullCommand"]
