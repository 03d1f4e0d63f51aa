"""
End-to-end render of a governed schema: DDL, DML, diagnostics and ERD.

The schema covers hosts, build events, server services, access and error
logs, one self-referencing foreign key and both enum table shapes.
"""

from enum import Enum

import pytest

from sql_aide.infrastructure.emit import SqlTemplate, render_script, unindent_whitespace
from sql_aide.infrastructure.schema import GovernedModel
from sql_aide.infrastructure.sql.dialects import SQLiteDialect


class HostType(Enum):
    linux = 0
    windows = 1


class BuildEventType(Enum):
    code1 = "value1"
    code2 = "value2"


def synthetic_schema():
    gm = GovernedModel.typical(dialect=SQLiteDialect())
    gm_auditable = GovernedModel.auditable(dialect=SQLiteDialect())
    sd, tcf, keys, housekeeping = gm.domains, gm.constraints, gm.keys, gm.housekeeping

    host_type = gm.ordinal_enum_table("host_type", HostType)

    publ_host = gm.text_pk_table(
        "publ_host",
        {
            "publ_host_id": keys.text_primary_key(),
            "host": tcf.unique(sd.text()),
            "host_identity": sd.json_text_nullable(),
            "host_type_code": host_type.references.code(),
            "mutation_count": sd.integer(),
            **housekeeping.columns,
        },
    )

    phc = publ_host.columns
    publ_host_view = gm.safe_view(
        "publ_host_vw",
        publ_host,
        SqlTemplate(
            "SELECT {columns} FROM publ_host WHERE {host} = 'my_host'",
            columns=publ_host.columns_all,
            host=phc["host"],
        ),
    )

    build_event_type = gm.text_enum_table("build_event_type", BuildEventType, is_idempotent=True)

    publ_build_event = gm.auto_inc_pk_table(
        "publ_build_event",
        {
            "publ_build_event_id": keys.auto_inc_primary_key(),
            "publ_host_id": publ_host.references.publ_host_id(),
            "build_event_type": build_event_type.references.code(),
            "iteration_index": sd.integer(),
            "build_initiated_at": sd.date_time(),
            "build_completed_at": sd.date_time(),
            "build_duration_ms": sd.integer(),
            "resources_originated_count": sd.integer(),
            "resources_persisted_count": sd.integer(),
            "resources_memoized_count": sd.integer(),
            "running_average": sd.float(),
            "running_average_big": sd.big_float(),
            "resource_utilization": sd.float_array(),
            "build_performance_metrics": sd.float_array_nullable(),
            "notes": sd.varchar_nullable(39),
            **gm_auditable.housekeeping.columns,
        },
        rows_mutable=True,
        rows_deletable=True,
    )

    publ_server_service = gm.auto_inc_pk_table(
        "publ_server_service",
        {
            "publ_server_service_id": keys.auto_inc_primary_key(),
            "service_started_at": sd.date_time(),
            "listen_host": sd.text(),
            "listen_port": sd.integer(),
            "publish_url": sd.text(),
            "publ_build_event_id": publ_build_event.references.publ_build_event_id(),
            **housekeeping.columns,
        },
    )

    publ_server_static_access_log = gm.auto_inc_pk_table(
        "publ_server_static_access_log",
        {
            "publ_server_static_access_log_id": keys.auto_inc_primary_key(),
            "status": sd.integer(),
            "asset_nature": sd.text(),
            "location_href": sd.text(),
            "filesys_target_path": sd.text(),
            "filesys_target_symlink": sd.text_nullable(),
            "publ_server_service_id": publ_server_service.references.publ_server_service_id(),
            "log": sd.json_text(),
            **housekeeping.columns,
        },
    )

    publ_server_error_log_id = keys.auto_inc_primary_key()
    publ_server_error_log = gm.auto_inc_pk_table(
        "publ_server_error_log",
        {
            "publ_server_error_log_id": publ_server_error_log_id,
            "parent_publ_server_error_log_id": sd.self_ref(publ_server_error_log_id).optional(),
            "location_href": sd.text(),
            "error_summary": sd.text(),
            "host_identity": sd.json_text_nullable(),
            "host_meta": sd.json_text_nullable(),
            "host_baggage": sd.jsonb_nullable(),
            "publ_server_service_id": publ_server_service.references.publ_server_service_id(),
            **housekeeping.columns,
        },
    )

    return {
        "governed_model": gm,
        "host_type": host_type,
        "publ_host": publ_host,
        "publ_host_view": publ_host_view,
        "build_event_type": build_event_type,
        "publ_build_event": publ_build_event,
        "publ_server_service": publ_server_service,
        "publ_server_static_access_log": publ_server_static_access_log,
        "publ_server_error_log": publ_server_error_log,
    }


def synthetic_script(ss):
    gts = ss["governed_model"].template_state
    publ_host = ss["publ_host"]
    return SqlTemplate(
        """
        -- Generated by unit test. DO NOT EDIT.
        -- Governance:
        -- * use 3rd normal form for tables
        -- * use views to wrap business logic
        -- * when denormalizing is required, use views (don't denormalize tables)
        -- * each table name MUST be singular (not plural) noun
        -- * each table MUST have a `table_name`_id primary key (typical table factories will do this automatically)
        -- * each table MUST have `created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL` column (typical table factories will do this automatically)
        -- * if table's rows are mutable, it MUST have a `updated_at TIMESTAMP` column (not having an updated_at means it's immutable)
        -- * if table's rows are deleteable, it MUST have a `deleted_at TIMESTAMP` column for soft deletes (not having an deleted_at means it's immutable)

        {lint_summary}

        {host_type}

        {publ_host}
        {persist_publ_host}

        {publ_host_view}

        {build_event_type}

        {publ_build_event}

        {publ_server_service}

        {publ_server_static_access_log}

        {publ_server_error_log}

        {publ_host_insert}

        {publ_host_select}

        -- Python ordinal enum members as RDBMS rows
        {host_type_seed}

        -- Python text enum members as RDBMS rows
        {build_event_type_seed}

        {engine_lint_summary}""",
        lint_summary=gts.lint_summary,
        host_type=ss["host_type"],
        publ_host=publ_host,
        persist_publ_host=gts.persist_sql(publ_host, "publ-host.sql"),
        publ_host_view=ss["publ_host_view"],
        build_event_type=ss["build_event_type"],
        publ_build_event=ss["publ_build_event"],
        publ_server_service=ss["publ_server_service"],
        publ_server_static_access_log=ss["publ_server_static_access_log"],
        publ_server_error_log=ss["publ_server_error_log"],
        publ_host_insert=publ_host.insert_dml(
            {
                "publ_host_id": "test",
                "host": "test",
                "host_identity": "testHI",
                "mutation_count": 0,
                "host_type_code": HostType.linux,
            }
        ),
        publ_host_select=publ_host.select({"host_identity": "testHI"}),
        host_type_seed=ss["host_type"].seed_dml,
        build_event_type_seed=ss["build_event_type"].seed_dml,
        engine_lint_summary=gts.engine_lint_summary,
    )


FIXTURE_SQL = unindent_whitespace(
    """
    -- Generated by unit test. DO NOT EDIT.
    -- Governance:
    -- * use 3rd normal form for tables
    -- * use views to wrap business logic
    -- * when denormalizing is required, use views (don't denormalize tables)
    -- * each table name MUST be singular (not plural) noun
    -- * each table MUST have a `table_name`_id primary key (typical table factories will do this automatically)
    -- * each table MUST have `created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL` column (typical table factories will do this automatically)
    -- * if table's rows are mutable, it MUST have a `updated_at TIMESTAMP` column (not having an updated_at means it's immutable)
    -- * if table's rows are deleteable, it MUST have a `deleted_at TIMESTAMP` column for soft deletes (not having an deleted_at means it's immutable)

    -- no SQL lint issues (typical lint manager)

    CREATE TABLE IF NOT EXISTS "host_type" (
        "code" INTEGER PRIMARY KEY NOT NULL,
        "value" TEXT NOT NULL,
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS "publ_host" (
        "publ_host_id" TEXT PRIMARY KEY NOT NULL,
        "host" TEXT /* UNIQUE COLUMN */ NOT NULL,
        "host_identity" TEXT,
        "host_type_code" INTEGER NOT NULL,
        "mutation_count" INTEGER NOT NULL,
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        "created_by" TEXT DEFAULT 'UNKNOWN',
        FOREIGN KEY("host_type_code") REFERENCES "host_type"("code"),
        UNIQUE("host")
    );
    -- encountered persistence request for 1_publ-host.sql

    CREATE VIEW IF NOT EXISTS "publ_host_vw"("publ_host_id", "host", "host_identity", "host_type_code", "mutation_count", "created_at", "created_by") AS
        SELECT "publ_host_id", "host", "host_identity", "host_type_code", "mutation_count", "created_at", "created_by" FROM publ_host WHERE "host" = 'my_host';

    CREATE TABLE IF NOT EXISTS "build_event_type" (
        "code" TEXT PRIMARY KEY NOT NULL,
        "value" TEXT NOT NULL,
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );

    CREATE TABLE IF NOT EXISTS "publ_build_event" (
        "publ_build_event_id" INTEGER PRIMARY KEY AUTOINCREMENT,
        "publ_host_id" TEXT NOT NULL,
        "build_event_type" TEXT NOT NULL,
        "iteration_index" INTEGER NOT NULL,
        "build_initiated_at" TIMESTAMP NOT NULL,
        "build_completed_at" TIMESTAMP NOT NULL,
        "build_duration_ms" INTEGER NOT NULL,
        "resources_originated_count" INTEGER NOT NULL,
        "resources_persisted_count" INTEGER NOT NULL,
        "resources_memoized_count" INTEGER NOT NULL,
        "running_average" REAL NOT NULL,
        "running_average_big" REAL NOT NULL,
        "resource_utilization" REAL[] NOT NULL,
        "build_performance_metrics" REAL[],
        "notes" VARCHAR(39),
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        "created_by" TEXT DEFAULT 'UNKNOWN',
        "updated_at" TIMESTAMP,
        "updated_by" TEXT,
        "deleted_at" TIMESTAMP,
        "deleted_by" TEXT,
        "activity_log" TEXT,
        FOREIGN KEY("publ_host_id") REFERENCES "publ_host"("publ_host_id"),
        FOREIGN KEY("build_event_type") REFERENCES "build_event_type"("code")
    );

    CREATE TABLE IF NOT EXISTS "publ_server_service" (
        "publ_server_service_id" INTEGER PRIMARY KEY AUTOINCREMENT,
        "service_started_at" TIMESTAMP NOT NULL,
        "listen_host" TEXT NOT NULL,
        "listen_port" INTEGER NOT NULL,
        "publish_url" TEXT NOT NULL,
        "publ_build_event_id" INTEGER NOT NULL,
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        "created_by" TEXT DEFAULT 'UNKNOWN',
        FOREIGN KEY("publ_build_event_id") REFERENCES "publ_build_event"("publ_build_event_id")
    );

    CREATE TABLE IF NOT EXISTS "publ_server_static_access_log" (
        "publ_server_static_access_log_id" INTEGER PRIMARY KEY AUTOINCREMENT,
        "status" INTEGER NOT NULL,
        "asset_nature" TEXT NOT NULL,
        "location_href" TEXT NOT NULL,
        "filesys_target_path" TEXT NOT NULL,
        "filesys_target_symlink" TEXT,
        "publ_server_service_id" INTEGER NOT NULL,
        "log" TEXT NOT NULL,
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        "created_by" TEXT DEFAULT 'UNKNOWN',
        FOREIGN KEY("publ_server_service_id") REFERENCES "publ_server_service"("publ_server_service_id")
    );

    CREATE TABLE IF NOT EXISTS "publ_server_error_log" (
        "publ_server_error_log_id" INTEGER PRIMARY KEY AUTOINCREMENT,
        "parent_publ_server_error_log_id" INTEGER,
        "location_href" TEXT NOT NULL,
        "error_summary" TEXT NOT NULL,
        "host_identity" TEXT,
        "host_meta" TEXT,
        "host_baggage" TEXT,
        "publ_server_service_id" INTEGER NOT NULL,
        "created_at" TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        "created_by" TEXT DEFAULT 'UNKNOWN',
        FOREIGN KEY("parent_publ_server_error_log_id") REFERENCES "publ_server_error_log"("publ_server_error_log_id"),
        FOREIGN KEY("publ_server_service_id") REFERENCES "publ_server_service"("publ_server_service_id")
    );

    INSERT INTO "publ_host" ("publ_host_id", "host", "host_identity", "host_type_code", "mutation_count", "created_by") VALUES ('test', 'test', 'testHI', 0, 0, NULL);

    SELECT "publ_host_id" FROM "publ_host" WHERE "host_identity" = 'testHI';

    -- Python ordinal enum members as RDBMS rows
    INSERT INTO "host_type" ("code", "value") VALUES (0, 'linux');
    INSERT INTO "host_type" ("code", "value") VALUES (1, 'windows');

    -- Python text enum members as RDBMS rows
    INSERT INTO "build_event_type" ("code", "value") VALUES ('code1', 'value1');
    INSERT INTO "build_event_type" ("code", "value") VALUES ('code2', 'value2');

    -- no template engine lint issues (typical lint manager)"""
)

FIXTURE_PUML = """@startuml IE
  hide circle
  skinparam linetype ortho
  skinparam roundcorner 20
  skinparam class {
    BackgroundColor White
    ArrowColor Silver
    BorderColor Silver
    FontColor Black
    FontSize 12
  }

  entity "host_type" as host_type {
    * **code**: INTEGER
    --
    * value: TEXT
      created_at: TIMESTAMP
  }

  entity "publ_host" as publ_host {
    * **publ_host_id**: TEXT
    --
    * host: TEXT
      host_identity: TEXT
    * host_type_code: INTEGER
    * mutation_count: INTEGER
      created_at: TIMESTAMP
      created_by: TEXT
  }

  entity "build_event_type" as build_event_type {
    * **code**: TEXT
    --
    * value: TEXT
      created_at: TIMESTAMP
  }

  entity "publ_build_event" as publ_build_event {
      **publ_build_event_id**: INTEGER
    --
    * publ_host_id: TEXT
    * build_event_type: TEXT
    * iteration_index: INTEGER
    * build_initiated_at: TIMESTAMP
    * build_completed_at: TIMESTAMP
    * build_duration_ms: INTEGER
    * resources_originated_count: INTEGER
    * resources_persisted_count: INTEGER
    * resources_memoized_count: INTEGER
    * running_average: REAL
    * running_average_big: REAL
    * resource_utilization: REAL[]
      build_performance_metrics: REAL[]
      notes: VARCHAR(39)
      created_at: TIMESTAMP
      created_by: TEXT
      updated_at: TIMESTAMP
      updated_by: TEXT
      deleted_at: TIMESTAMP
      deleted_by: TEXT
      activity_log: TEXT
  }

  entity "publ_server_service" as publ_server_service {
      **publ_server_service_id**: INTEGER
    --
    * service_started_at: TIMESTAMP
    * listen_host: TEXT
    * listen_port: INTEGER
    * publish_url: TEXT
    * publ_build_event_id: INTEGER
      created_at: TIMESTAMP
      created_by: TEXT
  }

  entity "publ_server_static_access_log" as publ_server_static_access_log {
      **publ_server_static_access_log_id**: INTEGER
    --
    * status: INTEGER
    * asset_nature: TEXT
    * location_href: TEXT
    * filesys_target_path: TEXT
      filesys_target_symlink: TEXT
    * publ_server_service_id: INTEGER
    * log: TEXT
      created_at: TIMESTAMP
      created_by: TEXT
  }

  entity "publ_server_error_log" as publ_server_error_log {
      **publ_server_error_log_id**: INTEGER
    --
      parent_publ_server_error_log_id: INTEGER
    * location_href: TEXT
    * error_summary: TEXT
      host_identity: TEXT
      host_meta: TEXT
      host_baggage: TEXT
    * publ_server_service_id: INTEGER
      created_at: TIMESTAMP
      created_by: TEXT
  }

  host_type |o..o{ publ_host
  publ_host |o..o{ publ_build_event
  build_event_type |o..o{ publ_build_event
  publ_build_event |o..o{ publ_server_service
  publ_server_service |o..o{ publ_server_static_access_log
  publ_server_error_log |o..o{ publ_server_error_log
  publ_server_service |o..o{ publ_server_error_log
@enduml"""


@pytest.mark.integration
class TestGovernedSchemaRender:
    @pytest.fixture
    def schema(self):
        return synthetic_schema()

    @pytest.fixture
    def rendered(self, schema):
        gts = schema["governed_model"].template_state
        ctx = gts.context()
        return schema, ctx, render_script(synthetic_script(schema), ctx)

    def test_sql_matches_fixture(self, rendered):
        _, _, sql = rendered
        assert sql == FIXTURE_SQL

    def test_zero_diagnostics(self, rendered):
        _, ctx, _ = rendered
        assert ctx.lint_issues == []
        assert ctx.engine_issues == []

    def test_symbol_table(self, rendered):
        schema, ctx, _ = rendered
        gts = schema["governed_model"].template_state
        assert len(gts.tables_declared) == 7
        assert gts.views_declared == ["publ_host_vw"]
        assert len(ctx.foreign_keys) == 7

    def test_erd_matches_fixture(self, rendered):
        schema, ctx, _ = rendered
        erd = schema["governed_model"].template_state.erd(ctx)
        assert erd.name == "IE"
        assert erd.content == FIXTURE_PUML

    def test_render_is_deterministic(self, rendered):
        schema, _, sql = rendered
        gts = schema["governed_model"].template_state
        second_ctx = gts.context()
        assert render_script(synthetic_script(schema), second_ctx) == sql
        assert gts.erd(second_ctx).content == FIXTURE_PUML

    def test_rebuilding_schema_is_identical(self, rendered):
        _, _, sql = rendered
        again = synthetic_schema()
        ctx = again["governed_model"].template_state.context()
        assert render_script(synthetic_script(again), ctx) == sql
