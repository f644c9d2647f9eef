"""Custom exceptions for the targeting context."""

from typing import Iterable, Optional


class InvalidNarrativeInputError(ValueError):
    """
    Exception raised when a block, mask, or context fails boundary validation.

    Attributes:
        message: Error description
        field_name: Name of the offending field, if known
    """

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.message = message
        self.field_name = field_name

        if field_name:
            message = f"{message} (field: {field_name})"
        super().__init__(message)


class InvalidWeightingConfigError(InvalidNarrativeInputError):
    """Exception raised when a weighting configuration cannot produce bounded scores."""

    pass


class RankingInvariantError(RuntimeError):
    """
    Exception raised when ranking produces an entry without a matching score.

    This signals a programming error inside the engine and is never expected
    under any input.

    Attributes:
        index: Position in the input pool that lost its score
    """

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Missing score for block at index {index}")


class MaskNotFoundError(KeyError):
    """
    Exception raised when a mask id is not present in the mask catalog.

    Attributes:
        mask_id: Requested mask id
        available: Ids present in the catalog
    """

    def __init__(self, mask_id: str, available: Iterable[str] = ()):
        self.mask_id = mask_id
        self.available = sorted(available)
        super().__init__(f"Mask '{mask_id}' not found. Available masks: {self.available}")

    def __str__(self) -> str:
        return self.args[0]
