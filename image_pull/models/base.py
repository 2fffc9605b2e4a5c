"""Base models for image-pull."""

from pydantic import BaseModel, ConfigDict


class ImagePullBaseModel(BaseModel):
    """Base model for all image-pull models."""

    model_config = ConfigDict(
        extra="forbid",  # Don't allow extra fields
        frozen=False,  # Allow modification (can be changed per model)
        validate_assignment=True,  # Validate on attribute assignment
    )


__all__ = ["ImagePullBaseModel"]
