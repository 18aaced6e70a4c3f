"""Domain model for factual claims."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from ..errors import FactCheckValidationError

MAX_CLAIM_LENGTH = 5000


class Claim(BaseModel):
    """Represents a factual statement to be verified."""

    text: str = Field(
        ...,
        min_length=1,
        max_length=MAX_CLAIM_LENGTH,
        description="The trimmed claim text to be verified",
    )
    submitted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the claim was submitted",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        json_schema_extra = {
            "example": {
                "text": "The Earth is approximately 4.54 billion years old.",
            }
        }

    @classmethod
    def from_text(cls, text: Optional[str]) -> "Claim":
        """Build a claim from raw user input.

        Args:
            text: Raw claim text, possibly padded with whitespace

        Returns:
            Validated claim

        Raises:
            FactCheckValidationError: If the trimmed text is empty or too long
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise FactCheckValidationError("Please enter a claim to fact-check.")
        if len(trimmed) > MAX_CLAIM_LENGTH:
            raise FactCheckValidationError(
                f"Claim is too long ({len(trimmed)} characters, maximum {MAX_CLAIM_LENGTH})."
            )
        return cls(text=trimmed)
