"""
Resolution of the pull policy from option values.

Options are folded into an immutable ``PullPolicy`` one at a time, in the
order they were given, starting from the built-in defaults. The same fold
is used for the configuration file and for the command line so both
accept identical spellings and values.
"""

from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from pydantic import ValidationError

from ..exceptions import InvalidInputError
from ..models.policy import PullPolicy, VerifyMode

# Accepted boolean spellings (case-insensitive)
TRUE_VALUES = frozenset({"1", "yes", "y", "true", "t", "on"})
FALSE_VALUES = frozenset({"0", "no", "n", "false", "f", "off"})

OptionValue = Any
Option = Tuple[str, OptionValue]


def parse_boolean(value: OptionValue) -> bool:
    """
    Parse a boolean option value.

    Args:
        value: A bool, or one of 1/yes/y/true/t/on or 0/no/n/false/f/off

    Returns:
        The parsed boolean

    Raises:
        ValueError: If the value is not a recognized boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
    raise ValueError(f"not a boolean: {value!r}")


def parse_verify_mode(value: OptionValue) -> VerifyMode:
    """
    Parse a verification mode literal.

    Raises:
        InvalidInputError: If the value is not one of no, checksum, signature
    """
    try:
        return VerifyMode(value)
    except ValueError as e:
        raise InvalidInputError(f"Invalid verification setting '{value}'") from e


def _boolean_option(field: str) -> Callable[[str, OptionValue], Dict[str, Any]]:
    def apply(name: str, value: OptionValue) -> Dict[str, Any]:
        try:
            return {field: parse_boolean(value)}
        except ValueError as e:
            raise InvalidInputError(f"Failed to parse --{name}= parameter '{value}'") from e

    return apply


def _force_option(name: str, value: OptionValue) -> Dict[str, Any]:
    # --force is a plain flag on the command line but a boolean in the config file
    if value is None:
        return {"force": True}
    return _boolean_option("force")(name, value)


def _image_root_option(name: str, value: OptionValue) -> Dict[str, Any]:
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"Invalid --{name}= parameter '{value}'")
    return {"image_root": value}


def _verify_option(name: str, value: OptionValue) -> Dict[str, Any]:
    return {"verify": parse_verify_mode(value)}


OPTION_HANDLERS: Dict[str, Callable[[str, OptionValue], Dict[str, Any]]] = {
    "force": _force_option,
    "image-root": _image_root_option,
    "verify": _verify_option,
    "settings": _boolean_option("settings"),
    "roothash": _boolean_option("roothash"),
    "roothash-signature": _boolean_option("roothash_signature"),
    "verity": _boolean_option("verity"),
}


def normalize_option_name(name: str) -> str:
    """Normalize "--roothash_signature" style spellings to "roothash-signature"."""
    return name.lstrip("-").replace("_", "-")


class PolicyResolver:
    """
    Fold option overrides into a ``PullPolicy``.

    Example:
        >>> policy = PolicyResolver().resolve([("roothash", "no"), ("verify", "checksum")])
        >>> policy.roothash, policy.roothash_signature, policy.verify.value
        (False, False, 'checksum')
    """

    def __init__(self, defaults: Optional[PullPolicy] = None) -> None:
        """
        Initialize the resolver.

        Args:
            defaults: Starting policy, the built-in defaults if not given
        """
        self.defaults = defaults if defaults is not None else PullPolicy()

    @staticmethod
    def apply_option(policy: PullPolicy, name: str, value: OptionValue) -> PullPolicy:
        """
        Apply a single option to a policy.

        Args:
            policy: Policy to start from
            name: Option name, e.g. "roothash" or "--image-root"
            value: Raw option value (None for valueless flags)

        Returns:
            A new policy with the option applied

        Raises:
            InvalidInputError: If the option is unknown or its value is invalid
        """
        handler = OPTION_HANDLERS.get(normalize_option_name(name))
        if handler is None:
            raise InvalidInputError(f"Unknown option '{name}'")

        changes = handler(normalize_option_name(name), value)
        try:
            return PullPolicy.model_validate({**policy.model_dump(), **changes})
        except ValidationError as e:
            raise InvalidInputError(f"Invalid value '{value}' for option '{name}': {e}") from e

    def resolve(self, options: Iterable[Option], base: Optional[PullPolicy] = None) -> PullPolicy:
        """
        Fold options, in order, into the base policy.

        Args:
            options: (name, value) pairs in the order they were given
            base: Policy to start from, the resolver's defaults if not given

        Returns:
            The resulting immutable policy
        """
        policy = base if base is not None else self.defaults
        for name, value in options:
            policy = self.apply_option(policy, name, value)
        return policy


__all__ = [
    "PolicyResolver",
    "parse_boolean",
    "parse_verify_mode",
    "normalize_option_name",
    "OPTION_HANDLERS",
]
