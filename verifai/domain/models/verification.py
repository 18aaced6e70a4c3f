"""Verdict and confidence vocabularies."""

from enum import Enum


class Verdict(str, Enum):
    """Possible verification outcomes."""

    TRUE = "TRUE"
    FALSE = "FALSE"
    PARTIALLY_TRUE = "PARTIALLY_TRUE"
    UNVERIFIABLE = "UNVERIFIABLE"  # Also the default when no verdict is declared


class ConfidenceLevel(str, Enum):
    """Confidence declared by the model."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
