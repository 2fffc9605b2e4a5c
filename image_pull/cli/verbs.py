"""
Verb dispatch for the image-pull command line.

A verb is the first positional argument; its handler receives the full
positional argument list (verb included) and the invocation context.
"""

from typing import Any, Callable, List, Optional, Sequence

from pydantic import Field

from ..exceptions import InvalidInputError
from ..models.base import ImagePullBaseModel

VerbHandler = Callable[[List[str], Any], int]


class Verb(ImagePullBaseModel):
    """
    A command verb and its accepted argument counts.

    Attributes:
        name: Verb as typed on the command line
        min_args: Minimum number of positional arguments, verb included
        max_args: Maximum number of positional arguments, None for no limit
        handler: Callable receiving (argv, userdata) and returning an exit status
    """

    name: str
    min_args: int = Field(default=1, ge=1)
    max_args: Optional[int] = None
    handler: VerbHandler


def dispatch_verb(argv: Sequence[str], verbs: Sequence[Verb], userdata: Any = None) -> int:
    """
    Run the handler of the verb named by ``argv[0]``.

    Args:
        argv: Positional arguments, verb first
        verbs: Known verbs
        userdata: Passed through to the handler

    Returns:
        The handler's exit status

    Raises:
        InvalidInputError: If the verb is missing or unknown, or the argument
            count is out of range
    """
    if not argv:
        raise InvalidInputError("Command verb required.")

    verb = next((v for v in verbs if v.name == argv[0]), None)
    if verb is None:
        raise InvalidInputError(f"Unknown command verb '{argv[0]}'.")

    if len(argv) < verb.min_args:
        raise InvalidInputError("Too few arguments.")
    if verb.max_args is not None and len(argv) > verb.max_args:
        raise InvalidInputError("Too many arguments.")

    return verb.handler(list(argv), userdata)


__all__ = ["Verb", "VerbHandler", "dispatch_verb"]
