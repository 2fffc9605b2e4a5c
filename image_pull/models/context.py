"""Context model passed from the CLI to verb handlers."""

from typing import List, Optional

from .base import ImagePullBaseModel
from .policy import PullPolicy
from ..utils.constants import DEFAULT_KEYRING


class PullContext(ImagePullBaseModel):
    """
    Everything a verb handler needs besides its arguments.

    Attributes:
        policy: Resolved pull policy
        help_text: Rendered CLI help, printed by the help verb
        keyring: Keyring for signature verification
        search_paths: Image store search path override, None for the defaults
        debug: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with HTTP logs)
    """

    policy: PullPolicy
    help_text: str = ""
    keyring: str = DEFAULT_KEYRING
    search_paths: Optional[List[str]] = None
    debug: int = 0


__all__ = ["PullContext"]
