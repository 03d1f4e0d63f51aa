"""
Unit tests for views with explicit column lists.
"""

import pytest
from pydantic import BaseModel

from sql_aide.infrastructure.emit import SqlTemplate, render_script
from sql_aide.infrastructure.exceptions import SqlConstructionError
from sql_aide.infrastructure.schema import View


@pytest.fixture
def publ_host(gm):
    return gm.text_pk_table(
        "publ_host",
        {"publ_host_id": gm.keys.text_primary_key(), "host": gm.constraints.unique(gm.domains.text())},
    )


class TestView:
    def test_explicit_columns_from_table(self, gm, publ_host, sqlite_ctx):
        body = SqlTemplate(
            "SELECT {cols} FROM publ_host WHERE {host} = 'my_host'",
            cols=publ_host.columns_all,
            host=publ_host.columns["host"],
        )
        view = gm.safe_view("publ_host_vw", publ_host, body)
        text = render_script(SqlTemplate("{v}", v=view), sqlite_ctx)
        assert text == (
            'CREATE VIEW IF NOT EXISTS "publ_host_vw"("publ_host_id", "host") AS\n'
            '    SELECT "publ_host_id", "host" FROM publ_host WHERE "host" = \'my_host\';'
        )
        assert list(sqlite_ctx.declared_views) == ["publ_host_vw"]
        assert sqlite_ctx.lint_issues == []

    def test_wildcard_select_raises_one_diagnostic(self, publ_host, sqlite_ctx):
        view = View("publ_host_vw", publ_host, "SELECT * FROM publ_host")
        render_script(SqlTemplate("{v}\n{v}", v=view), sqlite_ctx)
        assert [i.code for i in sqlite_ctx.lint_issues] == ["wildcard-select"]
        assert sqlite_ctx.lint_issues[0].subject == "publ_host_vw"

    def test_columns_from_pydantic_model(self, sqlite_ctx):
        class HostRow(BaseModel):
            host: str
            mutation_count: int

        view = View("v", HostRow, 'SELECT "host", "mutation_count" FROM publ_host')
        assert view.render(sqlite_ctx).startswith(
            'CREATE VIEW IF NOT EXISTS "v"("host", "mutation_count") AS'
        )

    def test_columns_from_mapping_and_sequence(self):
        assert View("v", {"a": 1, "b": 2}, "SELECT 1, 2").column_names == ["a", "b"]
        assert View("v", ["x"], "SELECT 1").column_names == ["x"]

    def test_postgresql_view_prefix(self, pg_ctx):
        view = View("v", ["x"], "SELECT 1")
        assert view.render(pg_ctx).startswith('CREATE OR REPLACE VIEW "v"("x") AS')

    def test_empty_column_list(self):
        with pytest.raises(SqlConstructionError, match="non-empty column list"):
            View("v", [], "SELECT 1")

    def test_string_shape_rejected(self):
        with pytest.raises(SqlConstructionError):
            View("v", "abc", "SELECT 1")
