"""Precise unit tests for Query and QueryBuilder.

Tests focus on validation, immutability of each step, and URL serialization.
"""

from __future__ import annotations

import pytest

from altadata.config import UNBOUNDED
from altadata.core import (
    FilterCondition,
    FilterOperator,
    InvalidArgumentError,
    Query,
    QueryBuilder,
    SortDirection,
    query,
)

BASE = "https://www.altadata.io/data/api/"
PRODUCT = "co_10_jhucs_03"


class TestQueryLimit:
    """Test limit validation."""

    def test_with_product_is_unbounded(self):
        q = QueryBuilder.with_product(PRODUCT)
        assert q.product_code == PRODUCT
        assert q.limit == UNBOUNDED
        assert not q.is_bounded
        assert q.filters == ()
        assert q.sort is None
        assert q.columns is None

    def test_with_limit_one_succeeds(self):
        q = QueryBuilder.with_limit(PRODUCT, 1)
        assert q.limit == 1
        assert q.is_bounded

    @pytest.mark.parametrize("limit", [0, -5, -1])
    def test_with_limit_rejects_non_positive(self, limit):
        with pytest.raises(InvalidArgumentError, match="greater than 0"):
            QueryBuilder.with_limit(PRODUCT, limit)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            query(PRODUCT, limit=0)

    def test_query_factory(self):
        assert query(PRODUCT).limit == UNBOUNDED
        assert query(PRODUCT, limit=10).limit == 10

    def test_with_limit_and_unbounded_return_new_queries(self):
        base = query(PRODUCT)
        bounded = base.with_limit(25)
        assert bounded.limit == 25
        assert base.limit == UNBOUNDED
        assert bounded.unbounded().limit == UNBOUNDED

    def test_empty_product_code_rejected(self):
        with pytest.raises(InvalidArgumentError):
            query("")


class TestQuerySort:
    """Test sort direction validation."""

    @pytest.mark.parametrize("direction", ["asc", "desc"])
    def test_sort_by_valid_direction(self, direction):
        q = query(PRODUCT).sort_by("reported_date", direction)
        assert q.sort is not None
        assert q.sort.column == "reported_date"
        assert q.sort.direction == SortDirection(direction)

    def test_sort_by_enum_direction(self):
        q = query(PRODUCT).sort_by("reported_date", SortDirection.DESC)
        assert q.sort.direction is SortDirection.DESC

    @pytest.mark.parametrize("direction", ["ascending", "ASC", "", "up"])
    def test_sort_by_invalid_direction_leaves_sort_unset(self, direction):
        q = query(PRODUCT)
        with pytest.raises(InvalidArgumentError):
            q.sort_by("reported_date", direction)
        assert q.sort is None

    def test_builder_sort_failure_keeps_previous_state(self):
        builder = QueryBuilder(PRODUCT)
        with pytest.raises(InvalidArgumentError):
            builder.sort_by("reported_date", "ascending")
        assert builder.build().sort is None

    def test_sort_overwrites_previous_sort(self):
        q = query(PRODUCT).sort_by("a", "asc").sort_by("b", "desc")
        assert q.sort.column == "b"
        assert q.sort.direction is SortDirection.DESC


class TestQueryFilters:
    """Test filter accumulation."""

    @pytest.mark.parametrize(
        "method,operator",
        [
            ("filter_eq", FilterOperator.EQ),
            ("filter_neq", FilterOperator.NEQ),
            ("filter_gt", FilterOperator.GT),
            ("filter_gte", FilterOperator.GTE),
            ("filter_lt", FilterOperator.LT),
            ("filter_lte", FilterOperator.LTE),
        ],
    )
    def test_single_value_filters(self, method, operator):
        q = getattr(query(PRODUCT), method)("confirmed", "100")
        assert q.filters == (
            FilterCondition(column="confirmed", operator=operator, values=("100",)),
        )

    def test_filter_in_and_not_in(self):
        q = (
            query(PRODUCT)
            .filter_in("province_state", ["Montana", "Utah"])
            .filter_not_in("county", ["A"])
        )
        assert q.filters[0].operator is FilterOperator.IN
        assert q.filters[0].values == ("Montana", "Utah")
        assert q.filters[1].operator is FilterOperator.NOT_IN
        assert q.filters[1].values == ("A",)

    def test_filter_in_rejects_empty_values(self):
        with pytest.raises(InvalidArgumentError):
            query(PRODUCT).filter_in("province_state", [])

    def test_single_value_operator_rejects_many_values(self):
        with pytest.raises(InvalidArgumentError):
            query(PRODUCT).where("a", FilterOperator.EQ, ["1", "2"])

    def test_filter_rejects_empty_column(self):
        with pytest.raises(InvalidArgumentError):
            query(PRODUCT).filter_eq("", "1")

    def test_where_accepts_operator_token(self):
        q = query(PRODUCT).where("a", "in", ["1", "2"])
        assert q.filters[0].operator is FilterOperator.IN
        assert q.to_params() == [("a_in", "1,2")]

    def test_where_rejects_unknown_operator_token(self):
        with pytest.raises(InvalidArgumentError, match="unknown filter operator"):
            query(PRODUCT).where("a", "bogus", ["1"])

    def test_where_token_with_empty_values(self):
        with pytest.raises(InvalidArgumentError):
            query(PRODUCT).where("a", "eq", [])
        with pytest.raises(InvalidArgumentError):
            QueryBuilder(PRODUCT).where("a", "notin", [])

    def test_each_step_returns_new_query(self):
        base = query(PRODUCT)
        first = base.filter_eq("a", "1")
        second = first.filter_gt("b", "2")
        assert base.filters == ()
        assert len(first.filters) == 1
        assert len(second.filters) == 2

    def test_filter_order_preserved_but_conjunctive(self):
        ab = query(PRODUCT).filter_eq("a", "1").filter_gt("b", "2")
        ba = query(PRODUCT).filter_gt("b", "2").filter_eq("a", "1")

        assert ab.filters != ba.filters
        assert set(ab.filters) == set(ba.filters)
        assert ab.build_url(BASE, "key", 1) != ba.build_url(BASE, "key", 1)


class TestQuerySelect:
    """Test column selection."""

    def test_select_columns(self):
        q = query(PRODUCT).select_columns(["reported_date", "province_state"])
        assert q.columns == ("reported_date", "province_state")

    def test_select_columns_overwrites(self):
        q = query(PRODUCT).select_columns(["a"]).select_columns(["b", "c"])
        assert q.columns == ("b", "c")

    def test_select_columns_rejects_empty(self):
        with pytest.raises(InvalidArgumentError):
            query(PRODUCT).select_columns([])

    def test_select_columns_rejects_bare_string(self):
        with pytest.raises(InvalidArgumentError):
            query(PRODUCT).select_columns("reported_date")


class TestQuerySerialization:
    """Test request URL shape."""

    def test_minimal_url(self):
        url = query(PRODUCT).build_url(BASE, "KEY", 1)
        assert url == f"{BASE}{PRODUCT}/?format=json&api_key=KEY&page=1"

    def test_full_url_shape(self):
        q = (
            query(PRODUCT, limit=10)
            .sort_by("reported_date", "asc")
            .filter_eq("province_state", "Alabama")
            .filter_gte("confirmed", "100")
            .filter_in("county", ["A", "B"])
            .filter_not_in("fips", ["1", "2"])
            .select_columns(["reported_date", "province_state"])
        )
        assert q.build_url(BASE, "KEY", 3) == (
            f"{BASE}{PRODUCT}/?format=json&api_key=KEY"
            "&order_by=reported_date_asc"
            "&province_state_eq=Alabama"
            "&confirmed_gte=100"
            "&county_in=A,B"
            "&fips_notin=1,2"
            "&columns=reported_date,province_state"
            "&page=3"
        )

    def test_limit_is_not_serialized(self):
        url = query(PRODUCT, limit=5).build_url(BASE, "KEY", 1)
        assert "limit" not in url

    def test_reserved_characters_are_encoded(self):
        q = query(PRODUCT).filter_eq("province_state", "New York&x=1")
        assert q.to_params() == [("province_state_eq", "New%20York%26x%3D1")]

    def test_list_values_encoded_individually(self):
        q = query(PRODUCT).filter_in("name", ["a,b", "c d"])
        assert q.to_params() == [("name_in", "a%2Cb,c%20d")]

    def test_params_follow_call_order(self):
        q = query(PRODUCT).filter_eq("a", "1").sort_by("d", "asc").filter_gt("b", "2")
        assert q.to_params() == [("a_eq", "1"), ("order_by", "d_asc"), ("b_gt", "2")]

    def test_columns_before_filters(self):
        q = query(PRODUCT).select_columns(["a", "b"]).filter_eq("a", "1")
        assert q.to_params() == [("columns", "a,b"), ("a_eq", "1")]

    def test_repeated_sort_emitted_once_at_latest_position(self):
        q = (
            query(PRODUCT)
            .sort_by("d", "asc")
            .filter_eq("a", "1")
            .sort_by("d", "desc")
        )
        assert q.to_params() == [("a_eq", "1"), ("order_by", "d_desc")]

    def test_repeated_select_emitted_once_at_latest_position(self):
        q = (
            query(PRODUCT)
            .select_columns(["x"])
            .filter_eq("a", "1")
            .select_columns(["y", "z"])
        )
        assert q.to_params() == [("a_eq", "1"), ("columns", "y,z")]

    def test_limit_change_keeps_param_order(self):
        q = query(PRODUCT).filter_eq("a", "1").sort_by("d", "asc")
        assert q.with_limit(4).to_params() == q.to_params()
        assert q.with_limit(4).unbounded().to_params() == q.to_params()

    def test_builder_params_follow_call_order(self):
        q = (
            QueryBuilder(PRODUCT)
            .filter_lt("a", "9")
            .select_columns(["a"])
            .sort_by("a", "desc")
            .build()
        )
        assert q.to_params() == [("a_lt", "9"), ("columns", "a"), ("order_by", "a_desc")]


class TestQueryBuilder:
    """Test the mutable builder wrapper."""

    def test_builder_chain(self):
        q = (
            QueryBuilder(PRODUCT, limit=3)
            .sort_by("reported_date", "desc")
            .filter_eq("a", "1")
            .filter_neq("b", "2")
            .filter_gt("c", "3")
            .filter_gte("d", "4")
            .filter_lt("e", "5")
            .filter_lte("f", "6")
            .filter_in("g", ["7", "8"])
            .filter_not_in("h", ["9"])
            .select_columns(["a"])
            .build()
        )
        assert isinstance(q, Query)
        assert q.limit == 3
        assert [c.operator for c in q.filters] == list(FilterOperator)
        assert q.columns == ("a",)

    def test_builder_limit_validation(self):
        with pytest.raises(InvalidArgumentError):
            QueryBuilder(PRODUCT, limit=0)
        builder = QueryBuilder(PRODUCT)
        with pytest.raises(InvalidArgumentError):
            builder.limit(-3)
        assert builder.limit(7).build().limit == 7
        assert builder.unbounded().build().limit == UNBOUNDED

    def test_built_query_is_independent_of_later_steps(self):
        builder = QueryBuilder(PRODUCT)
        snapshot = builder.filter_eq("a", "1").build()
        builder.filter_eq("b", "2")
        assert len(snapshot.filters) == 1
        assert len(builder.build().filters) == 2
