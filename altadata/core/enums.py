"""Core enumerations for query construction.

Architecture:
    String enums whose values are the literal tokens the AltaData API expects
    in request URLs. Keeping the wire token as the enum value lets the query
    serializer emit ``f"{column}_{operator.value}"`` without a lookup table.

Key Types:
    - FilterOperator: Comparison and set-membership operators
    - SortDirection: Ascending or descending order
"""

from __future__ import annotations

from enum import Enum

from .exceptions import InvalidArgumentError


class FilterOperator(str, Enum):
    """Filter operators supported by the data API.

    The value is the suffix appended to the column name in the request
    (``reported_date_gte=2020-05-01``).
    """

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NOT_IN = "notin"

    @property
    def is_multi_value(self) -> bool:
        """True for set-membership operators that accept several values."""
        return self in (FilterOperator.IN, FilterOperator.NOT_IN)


class SortDirection(str, Enum):
    """Sort order for the ``order_by`` parameter."""

    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, token: str | SortDirection) -> SortDirection:
        """Convert a direction token into a SortDirection.

        Only the exact tokens ``"asc"`` and ``"desc"`` are accepted.

        Raises:
            InvalidArgumentError: If the token is not a known direction
        """
        if isinstance(token, SortDirection):
            return token
        for member in cls:
            if member.value == token:
                return member
        raise InvalidArgumentError(f"order_method parameter must be 'asc' or 'desc', got {token!r}")
