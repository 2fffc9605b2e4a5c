"""Download and verification policy models."""

import enum
from typing import TYPE_CHECKING, Any

from pydantic import ConfigDict, StrictBool, field_validator, model_validator

from .base import ImagePullBaseModel
from ..utils.constants import DEFAULT_IMAGE_ROOT

if TYPE_CHECKING:
    from .image import ImageKind


class PullFlags(enum.IntFlag):
    """Options handed to a puller, filtered by the image kind's mask."""

    FORCE = 1 << 0
    SETTINGS = 1 << 1
    ROOTHASH = 1 << 2
    ROOTHASH_SIGNATURE = 1 << 3
    VERITY = 1 << 4


class VerifyMode(str, enum.Enum):
    """How downloaded content is authenticated."""

    NONE = "no"
    CHECKSUM = "checksum"
    SIGNATURE = "signature"


class PullPolicy(ImagePullBaseModel):
    """
    Immutable download and verification policy for one invocation.

    Built by folding option values into the defaults one at a time (see
    ``PolicyResolver``). Turning off root hash retrieval always turns off
    root hash signature retrieval as well, whatever the option order.

    Attributes:
        force: Overwrite an existing local image
        settings: Fetch the settings (.nspawn) file
        roothash: Fetch the root hash file
        roothash_signature: Fetch the root hash signature file
        verity: Fetch the verity data file
        verify: Verification mode for downloaded content
        image_root: Directory images are written to
    """

    model_config = ConfigDict(frozen=True)

    force: StrictBool = False
    settings: StrictBool = True
    roothash: StrictBool = True
    roothash_signature: StrictBool = True
    verity: StrictBool = True
    verify: VerifyMode = VerifyMode.SIGNATURE
    image_root: str = DEFAULT_IMAGE_ROOT

    @model_validator(mode="before")
    @classmethod
    def roothash_signature_requires_roothash(cls, data: Any) -> Any:
        """Drop root hash signature retrieval whenever root hash retrieval is off."""
        if isinstance(data, dict) and data.get("roothash") is False:
            data = {**data, "roothash_signature": False}
        return data

    @field_validator("image_root")
    @classmethod
    def validate_image_root(cls, v: str) -> str:
        """Validate that the image root is a non-empty path."""
        if not v.strip():
            raise ValueError("image_root must not be empty")
        return v

    @property
    def flags(self) -> PullFlags:
        """The policy as a PullFlags bitmask."""
        flags = PullFlags(0)
        for flag, enabled in (
            (PullFlags.FORCE, self.force),
            (PullFlags.SETTINGS, self.settings),
            (PullFlags.ROOTHASH, self.roothash),
            (PullFlags.ROOTHASH_SIGNATURE, self.roothash_signature),
            (PullFlags.VERITY, self.verity),
        ):
            if enabled:
                flags |= flag
        return flags

    def flags_for(self, kind: "ImageKind") -> PullFlags:
        """Return the flags recognized by pullers of the given kind."""
        return self.flags & kind.flags_mask


__all__ = ["PullFlags", "VerifyMode", "PullPolicy"]
