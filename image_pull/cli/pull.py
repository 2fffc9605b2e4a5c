"""
Verb handlers for pulling images.

This module provides the ``help``, ``tar`` and ``raw`` verbs.
"""

import click

from ..models.context import PullContext
from ..models.image import ImageKind
from ..pull import default_puller_factories
from ..services.image_store import ImageStore
from ..services.orchestrator import PullOrchestrator
from .verbs import Verb


def help_verb(argv: list, context: PullContext) -> int:
    """Print the command line help."""
    click.echo(context.help_text)
    return 0


def _pull(kind: ImageKind, argv: list, context: PullContext) -> int:
    url = argv[1]
    local = argv[2] if len(argv) >= 3 else None

    store = ImageStore(search_paths=context.search_paths, image_root=context.policy.image_root)
    orchestrator = PullOrchestrator(
        context.policy,
        store=store,
        puller_factories=default_puller_factories(keyring=context.keyring),
    )
    return orchestrator.pull(kind, url, local)


def pull_tar(argv: list, context: PullContext) -> int:
    """Pull a tarball image: ``tar URL [NAME]``."""
    return _pull(ImageKind.TAR, argv, context)


def pull_raw(argv: list, context: PullContext) -> int:
    """Pull a raw disk image: ``raw URL [NAME]``."""
    return _pull(ImageKind.RAW, argv, context)


VERBS = [
    Verb(name="help", min_args=1, max_args=None, handler=help_verb),
    Verb(name="tar", min_args=2, max_args=3, handler=pull_tar),
    Verb(name="raw", min_args=2, max_args=3, handler=pull_raw),
]


__all__ = ["VERBS", "help_verb", "pull_tar", "pull_raw"]
