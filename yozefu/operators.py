"""Operators used by comparisons in search queries."""

from __future__ import annotations

from enum import Enum


class StringOperator(Enum):
    """Operators comparing two strings."""

    CONTAIN = "contains"
    EQUAL = "=="
    NOT_EQUAL = "!="
    START_WITH = "starts with"

    def apply(self, left: str, right: str) -> bool:
        """Compare ``left`` with ``right``."""
        match self:
            case StringOperator.CONTAIN:
                return right in left
            case StringOperator.EQUAL:
                return left == right
            case StringOperator.NOT_EQUAL:
                return left != right
            case StringOperator.START_WITH:
                return left.startswith(right)
        raise AssertionError(self)

    def __str__(self) -> str:
        return self.value


class NumberOperator(Enum):
    """Operators comparing two numbers or timestamps."""

    GREATER_THAN = ">"
    GREATER_OR_EQUAL = ">="
    LOWER_THAN = "<"
    LOWER_OR_EQUAL = "<="
    EQUAL = "=="
    NOT_EQUAL = "!="

    def apply(self, left, right) -> bool:
        """Compare ``left`` with ``right``."""
        match self:
            case NumberOperator.GREATER_THAN:
                return left > right
            case NumberOperator.GREATER_OR_EQUAL:
                return left >= right
            case NumberOperator.LOWER_THAN:
                return left < right
            case NumberOperator.LOWER_OR_EQUAL:
                return left <= right
            case NumberOperator.EQUAL:
                return left == right
            case NumberOperator.NOT_EQUAL:
                return left != right
        raise AssertionError(self)

    def __str__(self) -> str:
        return self.value