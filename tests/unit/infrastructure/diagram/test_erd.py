"""
Unit tests for PlantUML IE diagram derivation.
"""

import pytest

from sql_aide.config import get_settings
from sql_aide.infrastructure.diagram import ErdOptions, plantuml_ie_erd
from sql_aide.infrastructure.emit import ForeignKeyEdge, SqlTemplate, render_script
from sql_aide.infrastructure.exceptions import SqlConstructionError


@pytest.fixture
def rendered(gm, sqlite_ctx):
    parent = gm.text_pk_table(
        "parent",
        {"parent_id": gm.keys.text_primary_key(), "note": gm.domains.text_nullable()},
    )
    child = gm.auto_inc_pk_table(
        "child",
        {
            "child_id": gm.keys.auto_inc_primary_key(),
            "parent_id": parent.references.parent_id(),
        },
    )
    render_script(SqlTemplate("{p}\n{c}", p=parent, c=child), sqlite_ctx)
    return sqlite_ctx


class TestPlantumlIeErd:
    def test_content(self, rendered):
        erd = plantuml_ie_erd(rendered)
        assert erd.name == "IE"
        lines = erd.content.splitlines()
        assert lines[0] == "@startuml IE"
        assert lines[-1] == "@enduml"
        body = "\n".join(lines[11:])
        assert body == "\n".join(
            [
                "",
                '  entity "parent" as parent {',
                "    * **parent_id**: TEXT",
                "    --",
                "      note: TEXT",
                "  }",
                "",
                '  entity "child" as child {',
                "      **child_id**: INTEGER",
                "    --",
                "    * parent_id: TEXT",
                "  }",
                "",
                "  parent |o..o{ child",
                "@enduml",
            ]
        )

    def test_title_from_options(self, rendered):
        erd = plantuml_ie_erd(rendered, ErdOptions(title="hosts"))
        assert erd.content.startswith("@startuml hosts\n")
        assert erd.name == "hosts"

    def test_title_from_settings(self, rendered, monkeypatch):
        monkeypatch.setenv("SQLA_ERD_TITLE", "schema")
        get_settings.cache_clear()
        assert plantuml_ie_erd(rendered).name == "schema"

    def test_table_without_primary_key(self, gm, sqlite_ctx):
        table = gm.table("loose", {"a": gm.domains.text()})
        render_script(SqlTemplate("{t}", t=table), sqlite_ctx)
        content = plantuml_ie_erd(sqlite_ctx).content
        assert '  entity "loose" as loose {\n    * a: TEXT\n  }' in content

    def test_dangling_edge(self, rendered):
        rendered.add_foreign_key(ForeignKeyEdge("child", "x_id", "missing", "x_id"))
        with pytest.raises(SqlConstructionError, match="undeclared table missing"):
            plantuml_ie_erd(rendered)

    def test_edge_to_non_key_column(self, rendered):
        rendered.add_foreign_key(ForeignKeyEdge("child", "note", "parent", "note"))
        with pytest.raises(SqlConstructionError, match="not a key column"):
            plantuml_ie_erd(rendered)

    def test_deterministic(self, rendered):
        assert plantuml_ie_erd(rendered).content == plantuml_ie_erd(rendered).content
