"""Query value and fluent builder for AltaData data requests.

Architecture:
    A Query is an immutable value describing one retrieval: product code,
    column selection, filter conditions, sort order and limit. Every fluent
    call returns a new Query, so any intermediate step of a chain can be kept,
    inspected or reused without affecting the others.

    The request URL is produced in a single serialization step
    (``Query.build_url``) when a page is fetched, instead of being grown by
    string concatenation while the query is configured.

Design Decisions:
    - Frozen dataclass for Query: cheap copies through ``dataclasses.replace``
    - Pydantic models for FilterCondition and SortSpec: field constraints
      declared next to the fields
    - Validation happens before a new Query is created, so a failed call
      leaves the previous Query untouched
    - QueryBuilder is a thin mutable wrapper for conditional or loop-driven
      construction; it delegates every step to Query

See Also:
    - PaginatedFetcher: Consumes a Query and walks its pages
    - AltaDataClient.get_data: Entry point that creates a Query
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..config import RESPONSE_FORMAT, UNBOUNDED
from .enums import FilterOperator, SortDirection
from .exceptions import InvalidArgumentError

__all__ = [
    "FilterCondition",
    "SortSpec",
    "Query",
    "QueryBuilder",
    "query",
]


class FilterCondition(BaseModel):
    """A single column constraint, conjoined with every other condition."""

    column: str = Field(..., min_length=1)
    operator: FilterOperator
    values: tuple[str, ...] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_arity(self) -> FilterCondition:
        """Single-value operators carry exactly one value."""
        if not self.operator.is_multi_value and len(self.values) != 1:
            raise ValueError(f"{self.operator.name} takes exactly one value")
        return self

    @property
    def param_name(self) -> str:
        return f"{self.column}_{self.operator.value}"


class SortSpec(BaseModel):
    """Sort column and direction."""

    column: str = Field(..., min_length=1)
    direction: SortDirection

    model_config = ConfigDict(frozen=True)

    @property
    def param_value(self) -> str:
        return f"{self.column}_{self.direction.value}"


_SORT = "sort"
_FILTER = "filter"
_COLUMNS = "columns"


def _validate_limit(limit: int) -> int:
    if limit < 1:
        raise InvalidArgumentError("limit parameter must be greater than 0")
    return limit


def _encode(value: str) -> str:
    return quote(value, safe="")


def _encode_list(values: Iterable[str]) -> str:
    # Commas separate list items on the wire, so only the items are encoded
    return ",".join(_encode(v) for v in values)


@dataclass(frozen=True)
class Query:
    """Immutable description of one data retrieval.

    Attributes:
        product_code: Data product code (e.g. ``"co_10_jhucs_03"``)
        columns: Columns the server should return, or None for all
        filters: Filter conditions in insertion order
        sort: Sort specification, or None for server order
        limit: Maximum records to return, or ``UNBOUNDED``
        clauses: Order in which sort, filters and columns were set; one
            ``"filter"`` entry per filter, at most one ``"sort"`` and one
            ``"columns"`` entry, each at the position of its latest call
    """

    product_code: str
    columns: tuple[str, ...] | None = None
    filters: tuple[FilterCondition, ...] = field(default_factory=tuple)
    sort: SortSpec | None = None
    limit: int = UNBOUNDED
    clauses: tuple[str, ...] = field(default=(), repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.product_code:
            raise InvalidArgumentError("product_code is required")
        if self.limit != UNBOUNDED:
            _validate_limit(self.limit)
        if not self.clauses:
            object.__setattr__(self, "clauses", self._default_clauses())

    def _default_clauses(self) -> tuple[str, ...]:
        clauses = [_SORT] if self.sort is not None else []
        clauses.extend(_FILTER for _ in self.filters)
        if self.columns:
            clauses.append(_COLUMNS)
        return tuple(clauses)

    def _moved_to_end(self, clause: str) -> tuple[str, ...]:
        return (*(c for c in self.clauses if c != clause), clause)

    @property
    def is_bounded(self) -> bool:
        return self.limit != UNBOUNDED

    # --- Limit --------------------------------------------------------------

    def with_limit(self, limit: int) -> Query:
        """Return a copy bounded to ``limit`` records.

        Raises:
            InvalidArgumentError: If limit is less than 1
        """
        return replace(self, limit=_validate_limit(limit))

    def unbounded(self) -> Query:
        return replace(self, limit=UNBOUNDED)

    # --- Sorting and selection ---------------------------------------------

    def sort_by(self, column: str, direction: str | SortDirection) -> Query:
        """Return a copy sorted by ``column``.

        Args:
            column: Column to which the order is applied
            direction: ``"asc"`` or ``"desc"``

        Raises:
            InvalidArgumentError: If direction is not a known token
        """
        sort_direction = SortDirection.parse(direction)
        try:
            spec = SortSpec(column=column, direction=sort_direction)
        except ValidationError as exc:
            raise InvalidArgumentError(f"invalid sort column {column!r}") from exc
        return replace(self, sort=spec, clauses=self._moved_to_end(_SORT))

    def select_columns(self, columns: Sequence[str]) -> Query:
        """Return a copy restricted to ``columns``, replacing any prior selection."""
        if isinstance(columns, str):
            raise InvalidArgumentError("columns must be a sequence of str, not str")
        selected = tuple(columns)
        if not selected:
            raise InvalidArgumentError("at least one column must be selected")
        return replace(self, columns=selected, clauses=self._moved_to_end(_COLUMNS))

    # --- Filters ------------------------------------------------------------

    def where(self, column: str, operator: FilterOperator | str, values: Sequence[str]) -> Query:
        """Return a copy with one more filter condition appended.

        Raises:
            InvalidArgumentError: If the operator is unknown, the column is
                empty, the value list is empty, or a single-value operator
                gets several values
        """
        try:
            operator = FilterOperator(operator)
        except ValueError as exc:
            raise InvalidArgumentError(f"unknown filter operator {operator!r}") from exc
        if isinstance(values, str):
            values = (values,)
        try:
            condition = FilterCondition(column=column, operator=operator, values=tuple(values))
        except ValidationError as exc:
            raise InvalidArgumentError(
                f"invalid {operator.name} condition on {column!r}: {exc.errors()[0]['msg']}"
            ) from exc
        return replace(
            self, filters=(*self.filters, condition), clauses=(*self.clauses, _FILTER)
        )

    def filter_eq(self, column: str, value: str) -> Query:
        return self.where(column, FilterOperator.EQ, (value,))

    def filter_neq(self, column: str, value: str) -> Query:
        return self.where(column, FilterOperator.NEQ, (value,))

    def filter_gt(self, column: str, value: str) -> Query:
        return self.where(column, FilterOperator.GT, (value,))

    def filter_gte(self, column: str, value: str) -> Query:
        return self.where(column, FilterOperator.GTE, (value,))

    def filter_lt(self, column: str, value: str) -> Query:
        return self.where(column, FilterOperator.LT, (value,))

    def filter_lte(self, column: str, value: str) -> Query:
        return self.where(column, FilterOperator.LTE, (value,))

    def filter_in(self, column: str, values: Sequence[str]) -> Query:
        return self.where(column, FilterOperator.IN, values)

    def filter_not_in(self, column: str, values: Sequence[str]) -> Query:
        return self.where(column, FilterOperator.NOT_IN, values)

    # --- Serialization ------------------------------------------------------

    def to_params(self) -> list[tuple[str, str]]:
        """Encoded query parameters, excluding credentials and page number.

        Parameters follow the order of the calls that set them. Filters keep
        their insertion order; ``order_by`` and ``columns`` appear once, at
        the position of the latest ``sort_by`` or ``select_columns`` call.
        """
        params: list[tuple[str, str]] = []
        filters = iter(self.filters)
        for clause in self.clauses:
            if clause == _SORT and self.sort is not None:
                params.append(("order_by", _encode(self.sort.param_value)))
            elif clause == _FILTER:
                condition = next(filters)
                params.append((_encode(condition.param_name), _encode_list(condition.values)))
            elif clause == _COLUMNS and self.columns:
                params.append(("columns", _encode_list(self.columns)))
        return params

    def build_url(self, base_url: str, api_key: str, page: int) -> str:
        """Serialize into the request URL for ``page``.

        Args:
            base_url: Data API base URL, ending with ``/``
            api_key: AltaData API key
            page: One-based page number

        Returns:
            ``<base><product>/?format=json&api_key=<key>&...&page=<n>``
        """
        parts = [
            ("format", RESPONSE_FORMAT),
            ("api_key", _encode(api_key)),
            *self.to_params(),
            ("page", str(page)),
        ]
        query_string = "&".join(f"{name}={value}" for name, value in parts)
        return f"{base_url}{_encode(self.product_code)}/?{query_string}"


class QueryBuilder:
    """Mutable builder over Query for conditional construction.

    Example:
        >>> builder = QueryBuilder("co_10_jhucs_03", limit=50)
        >>> if only_new_york:
        ...     builder.filter_eq("province_state", "New York")
        >>> q = builder.sort_by("reported_date", "desc").build()
    """

    def __init__(self, product_code: str, limit: int | None = None) -> None:
        self._query = (
            QueryBuilder.with_product(product_code)
            if limit is None
            else QueryBuilder.with_limit(product_code, limit)
        )

    @staticmethod
    def with_product(product_code: str) -> Query:
        """Start an unbounded query for ``product_code``."""
        return Query(product_code=product_code)

    @staticmethod
    def with_limit(product_code: str, limit: int) -> Query:
        """Start a query for ``product_code`` bounded to ``limit`` records.

        Raises:
            InvalidArgumentError: If limit is less than 1
        """
        return Query(product_code=product_code, limit=_validate_limit(limit))

    def limit(self, limit: int) -> QueryBuilder:
        self._query = self._query.with_limit(limit)
        return self

    def unbounded(self) -> QueryBuilder:
        self._query = self._query.unbounded()
        return self

    def sort_by(self, column: str, direction: str | SortDirection) -> QueryBuilder:
        self._query = self._query.sort_by(column, direction)
        return self

    def select_columns(self, columns: Sequence[str]) -> QueryBuilder:
        self._query = self._query.select_columns(columns)
        return self

    def where(self, column: str, operator: FilterOperator | str, values: Sequence[str]) -> QueryBuilder:
        self._query = self._query.where(column, operator, values)
        return self

    def filter_eq(self, column: str, value: str) -> QueryBuilder:
        return self.where(column, FilterOperator.EQ, (value,))

    def filter_neq(self, column: str, value: str) -> QueryBuilder:
        return self.where(column, FilterOperator.NEQ, (value,))

    def filter_gt(self, column: str, value: str) -> QueryBuilder:
        return self.where(column, FilterOperator.GT, (value,))

    def filter_gte(self, column: str, value: str) -> QueryBuilder:
        return self.where(column, FilterOperator.GTE, (value,))

    def filter_lt(self, column: str, value: str) -> QueryBuilder:
        return self.where(column, FilterOperator.LT, (value,))

    def filter_lte(self, column: str, value: str) -> QueryBuilder:
        return self.where(column, FilterOperator.LTE, (value,))

    def filter_in(self, column: str, values: Sequence[str]) -> QueryBuilder:
        return self.where(column, FilterOperator.IN, values)

    def filter_not_in(self, column: str, values: Sequence[str]) -> QueryBuilder:
        return self.where(column, FilterOperator.NOT_IN, values)

    def build(self) -> Query:
        return self._query


def query(product_code: str, limit: int | None = None) -> Query:
    """Convenience factory for a Query.

    Args:
        product_code: Data product code
        limit: Maximum records to return, or None for every page

    Raises:
        InvalidArgumentError: If limit is given and less than 1
    """
    if limit is None:
        return QueryBuilder.with_product(product_code)
    return QueryBuilder.with_limit(product_code, limit)
