"""
Tests for the SQL fragment builders.

Tests cover:
- Partial update SET clauses
- WHERE clause accumulation
- Company and job search filters
"""

import pytest

from app.core.errors import ApiError, ErrorKind
from app.core.sql import WhereClause, sql_for_partial_update
from app.crud.company import build_filter_clause as company_filter_clause
from app.crud.job import build_filter_clause as job_filter_clause


class TestPartialUpdate:
    """Tests for sql_for_partial_update"""

    def test_aliases_and_order(self):
        """Aliased fields use the column name; others keep their own name"""
        set_cols, values = sql_for_partial_update(
            {"firstName": "Aliya", "age": 32},
            {"firstName": "first_name"}
        )

        assert set_cols == '"first_name"=$1, "age"=$2'
        assert values == ["Aliya", 32]

    def test_placeholder_index_matches_position(self):
        """The nth fragment binds $n and values[n - 1]"""
        data = {f"f{i}": i * 10 for i in range(1, 6)}
        set_cols, values = sql_for_partial_update(data, {})

        fragments = set_cols.split(", ")
        assert len(fragments) == len(values) == 5
        for n, fragment in enumerate(fragments, start=1):
            assert fragment == f'"f{n}"=${n}'
            assert values[n - 1] == n * 10

    def test_null_values_are_kept(self):
        """None is a value to write, not a missing field"""
        set_cols, values = sql_for_partial_update({"salary": None, "equity": None})

        assert set_cols == '"salary"=$1, "equity"=$2'
        assert values == [None, None]

    def test_unused_aliases_are_ignored(self):
        """Aliases for fields that are not being updated have no effect"""
        set_cols, values = sql_for_partial_update(
            {"name": "New"},
            {"numEmployees": "num_employees", "logoUrl": "logo_url"}
        )

        assert set_cols == '"name"=$1'
        assert values == ["New"]

    def test_does_not_mutate_input(self):
        """The input mapping is left untouched"""
        data = {"numEmployees": 5}
        sql_for_partial_update(data, {"numEmployees": "num_employees"})

        assert data == {"numEmployees": 5}

    def test_empty_data_is_rejected(self):
        """An update with no fields fails with INVALID_INPUT"""
        with pytest.raises(ApiError) as exc_info:
            sql_for_partial_update({}, {"numEmployees": "num_employees"})

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.message == "No data"


class TestWhereClause:
    """Tests for the WHERE clause accumulator"""

    def test_empty(self):
        assert WhereClause().build() == ("", [])

    def test_literal_fragments_take_no_placeholder(self):
        """Literal predicates do not consume a parameter index"""
        where = WhereClause()
        where.add("a >= {}", 1)
        where.add("b > 0", literal=True)
        where.add("c <= {}", 3)

        assert where.build() == ("WHERE a >= $1 AND b > 0 AND c <= $2", [1, 3])

    def test_custom_start_index(self):
        """Numbering can continue after earlier parameters"""
        where = WhereClause(start=3)
        where.add("a = {}", "x")

        assert where.build() == ("WHERE a = $3", ["x"])


class TestCompanyFilters:
    """Tests for company search filters"""

    def test_no_filters(self):
        """No filters means no WHERE clause and no parameters"""
        assert company_filter_clause() == ("", [])
        assert company_filter_clause({}) == ("", [])

    def test_all_filters(self):
        """Predicates follow the fixed filter order"""
        where, values = company_filter_clause({
            "nameLike": "net",
            "maxEmployees": 500,
            "minEmployees": 10,
        })

        assert where == (
            "WHERE num_employees >= $1 AND num_employees <= $2 "
            "AND LOWER(name) LIKE LOWER($3)"
        )
        assert values == [10, 500, "%net%"]

    def test_name_like_only(self):
        where, values = company_filter_clause({"nameLike": "C1"})

        assert where == "WHERE LOWER(name) LIKE LOWER($1)"
        assert values == ["%C1%"]

    def test_none_counts_as_absent(self):
        """A filter set to None is skipped"""
        assert company_filter_clause({"minEmployees": None, "nameLike": None}) == ("", [])

    def test_unrecognized_filters_are_dropped(self):
        """Unknown keys produce no predicate"""
        assert company_filter_clause({"handle": "c1", "foo": 1}) == ("", [])

    @pytest.mark.parametrize("filters, field", [
        ({"minEmployees": "10"}, "minEmployees"),
        ({"minEmployees": True}, "minEmployees"),
        ({"maxEmployees": 2.5}, "maxEmployees"),
        ({"nameLike": 1}, "nameLike"),
    ])
    def test_bad_types_are_rejected(self, filters, field):
        """A mistyped filter fails with INVALID_INPUT naming the field"""
        with pytest.raises(ApiError) as exc_info:
            company_filter_clause(filters)

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert field in exc_info.value.message
        assert exc_info.value.detail == {"field": field}

    def test_does_not_mutate_input(self):
        filters = {"minEmployees": 1, "nameLike": "c"}
        company_filter_clause(filters)

        assert filters == {"minEmployees": 1, "nameLike": "c"}


class TestJobFilters:
    """Tests for job search filters"""

    def test_no_filters(self):
        assert job_filter_clause() == ("", [])

    def test_title(self):
        """Title is a case-insensitive partial match"""
        where, values = job_filter_clause({"title": "abc"})

        assert where == "WHERE LOWER(title) LIKE LOWER($1)"
        assert values == ["%abc%"]

    def test_min_salary_and_has_equity(self):
        """hasEquity adds a predicate but no parameter"""
        where, values = job_filter_clause({"minSalary": 200000, "hasEquity": True})

        assert where == "WHERE salary >= $1 AND equity > 0"
        assert values == [200000]

    def test_all_filters(self):
        where, values = job_filter_clause({"hasEquity": True, "minSalary": 5, "title": "eng"})

        assert where == "WHERE LOWER(title) LIKE LOWER($1) AND salary >= $2 AND equity > 0"
        assert values == ["%eng%", 5]

    @pytest.mark.parametrize("filters, field", [
        ({"title": 1}, "title"),
        ({"minSalary": "200000"}, "minSalary"),
        ({"minSalary": False}, "minSalary"),
        ({"hasEquity": False}, "hasEquity"),
        ({"hasEquity": "true"}, "hasEquity"),
        ({"hasEquity": 1}, "hasEquity"),
    ])
    def test_bad_types_are_rejected(self, filters, field):
        """A mistyped filter fails with INVALID_INPUT naming the field"""
        with pytest.raises(ApiError) as exc_info:
            job_filter_clause(filters)

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert field in exc_info.value.message

    def test_unrecognized_filters_are_dropped(self):
        assert job_filter_clause({"companyHandle": "c1"}) == ("", [])
