"""Schema generation and query execution against a fake ISS."""

import json
import random
import time

import pytest
from graphql import print_schema

from iss_graphql.errors import DuplicateFieldError, SchemaBuildError, TransportError
from iss_graphql.generator.schema import build_schema, generate_queries, parallel_generate_queries
from iss_graphql.generator.registry import build_shared_types
from iss_graphql.generator.specs import GenerationSpec
from iss_graphql.server import execute_query

from conftest import FIXTURES, make_client

SECURITIES = GenerationSpec(
    reference_id=5,
    enum_arg_overrides={"group_by": ["group", "type"]},
    arg_type_overrides={"limit": "number", "is_trading": "bool"},
)
ENGINE = GenerationSpec(
    reference_id=41,
    default_args={"engine": "stock"},
    query_name_overrides={"dailytable": "dailyTable", "timetable": "timeTable"},
)


def _rows(block: str, rows: list[dict]) -> bytes:
    return json.dumps([{"charsetinfo": {"name": "utf-8"}}, {block: rows}]).encode()


class TestGenerateQueries:
    def test_single_reference(self, iss_client):
        fields = generate_queries(ENGINE, iss_client, build_shared_types())
        assert list(fields) == ["engine", "timeTable", "dailyTable"]
        iss_client.fetch_reference.assert_called_once_with(41)
        iss_client.fetch_metadata.assert_called_once_with("engines/stock")


class TestParallelGenerateQueries:
    def test_merged_in_spec_order(self, iss_client):
        fields = parallel_generate_queries([ENGINE, SECURITIES], iss_client, build_shared_types())
        assert list(fields) == ["engine", "timeTable", "dailyTable", "securities"]

    def test_collision_fails_regardless_of_completion_order(self):
        specs = [
            ENGINE,
            SECURITIES,
            GenerationSpec(reference_id=41, default_args={"engine": "stock"}),
        ]
        messages = set()
        for seed in range(6):
            rng = random.Random(seed)
            client = make_client()
            fetch = client.fetch_reference.side_effect

            def slow_fetch(ref_id, fetch=fetch, rng=rng):
                time.sleep(rng.uniform(0, 0.02))
                return fetch(ref_id)

            client.fetch_reference.side_effect = slow_fetch
            with pytest.raises(DuplicateFieldError) as exc_info:
                parallel_generate_queries(specs, client, build_shared_types())
            messages.add(str(exc_info.value))
            assert exc_info.value.collisions == {"engine": [41, 41]}

        assert len(messages) == 1

    def test_failed_task_aborts_build(self):
        client = make_client()
        fetch = client.fetch_reference.side_effect

        def failing_fetch(ref_id):
            if ref_id == 5:
                raise TransportError("connection reset")
            return fetch(ref_id)

        client.fetch_reference.side_effect = failing_fetch
        with pytest.raises(TransportError):
            parallel_generate_queries([ENGINE, SECURITIES], client, build_shared_types())


class TestBuildSchema:
    def test_root_query(self, iss_client):
        schema = build_schema([SECURITIES, ENGINE], iss_client)
        assert schema.query_type.name == "RootQuery"
        assert set(schema.query_type.fields) == {"securities", "engine", "timeTable", "dailyTable"}

    def test_schema_is_reproducible(self):
        first = print_schema(build_schema([SECURITIES, ENGINE], make_client()))
        second = print_schema(build_schema([SECURITIES, ENGINE], make_client()))
        assert first == second

    def test_sdl_shapes(self, iss_client):
        sdl = print_schema(build_schema([SECURITIES, ENGINE], iss_client))
        assert "engine: String = \"stock\"" in sdl
        assert "lang: Language" in sdl
        assert "): [Engine]" in sdl
        assert "group_by: GroupBy" in sdl
        assert "limit: Long" in sdl
        assert "valtoday: Long" in sdl
        assert "is_trading: Boolean" in sdl
        assert "updatetime: DateTime" in sdl

    def test_clashing_type_names(self, iss_client):
        first = GenerationSpec(
            reference_id=41,
            default_args={"engine": "stock"},
            query_name_overrides={"dailytable": "dailyTables"},
        )
        second = GenerationSpec(
            reference_id=41,
            default_args={"engine": "stock"},
            query_name_overrides={
                "engine": "engineInfo",
                "timetable": "timeTables",
                "dailytable": "dailyTable",
            },
        )
        with pytest.raises(SchemaBuildError, match="DailyTable"):
            build_schema([first, second], iss_client)

    def test_no_fields(self, iss_client):
        with pytest.raises(SchemaBuildError):
            build_schema([], iss_client)


class TestExecution:
    @pytest.fixture
    def schema_and_client(self):
        client = make_client()
        return build_schema([SECURITIES, ENGINE], client), client

    def test_rows_resolved(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.return_value = (FIXTURES / "dailytable_41.json").read_bytes()

        result = execute_query(schema, "{ dailyTable { date is_work_day updatetime } }")

        assert "errors" not in result
        assert result["data"]["dailyTable"] == [
            {"date": "2024-03-01", "is_work_day": 1, "updatetime": "2024-03-01T10:15:00"},
            {"date": "2024-03-02", "is_work_day": 0, "updatetime": None},
        ]

    def test_default_path_argument(self, schema_and_client):
        schema, client = schema_and_client
        execute_query(schema, "{ dailyTable { date } }")
        assert client.fetch_data.call_args[0][0] == "engines/stock"

    def test_supplied_path_argument(self, schema_and_client):
        schema, client = schema_and_client
        execute_query(schema, '{ dailyTable(engine: "currency") { date } }')
        assert client.fetch_data.call_args[0][0] == "engines/currency"

    def test_shared_engine_type(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.return_value = _rows("engine", [{"id": 1, "name": "stock", "title": "Фондовый рынок"}])
        result = execute_query(schema, "{ engine(lang: EN) { id name title } }")
        assert result["data"]["engine"] == [{"id": 1, "name": "stock", "title": "Фондовый рынок"}]
        assert ("lang", "en") in client.fetch_data.call_args[0][1]

    def test_empty_response(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.return_value = b""
        assert execute_query(schema, "{ dailyTable { date } }") == {"data": {"dailyTable": []}}

    def test_value_beyond_32_bits(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.return_value = _rows(
            "securities", [{"SECID": "SBER", "VALTODAY": 3000000000}]
        )

        result = execute_query(schema, "{ securities { secid valtoday } }")

        assert "errors" not in result
        assert result["data"]["securities"] == [{"secid": "SBER", "valtoday": 3000000000}]

    def test_long_argument_beyond_32_bits(self, schema_and_client):
        schema, client = schema_and_client
        result = execute_query(schema, "{ securities(limit: 5000000000) { secid } }")
        assert "errors" not in result
        assert ("limit", "5000000000") in client.fetch_data.call_args[0][1]

    def test_malformed_datetime_is_a_field_error(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.return_value = _rows(
            "dailytable", [{"date": "2024-03-01", "UPDATETIME": "2024-13-40 99:99:99"}]
        )

        result = execute_query(schema, "{ dailyTable { date updatetime } }")

        assert result["data"]["dailyTable"] == [{"date": "2024-03-01", "updatetime": None}]
        assert len(result["errors"]) == 1
        assert result["errors"][0]["path"] == ["dailyTable", 0, "updatetime"]

    def test_unexpected_response_is_a_field_error(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.return_value = b'{"error": "bad"}'

        result = execute_query(schema, "{ dailyTable { date } securities { secid } }")

        assert result["data"]["dailyTable"] is None
        assert result["errors"][0]["path"] == ["dailyTable"]

    def test_transport_error_is_a_field_error(self, schema_and_client):
        schema, client = schema_and_client
        client.fetch_data.side_effect = TransportError("timeout")
        result = execute_query(schema, "{ timeTable { week_day } }")
        assert result["data"] == {"timeTable": None}
        assert "timeout" in result["errors"][0]["message"]

    def test_enum_argument(self, schema_and_client):
        schema, client = schema_and_client
        execute_query(schema, "{ securities(group_by: TYPE, limit: 5, is_trading: true) { secid } }")
        params = client.fetch_data.call_args[0][1]
        assert ("group_by", "type") in params
        assert ("limit", "5") in params
        assert ("is_trading", "true") in params

    def test_enum_argument_rejected_before_resolving(self, schema_and_client):
        schema, client = schema_and_client
        result = execute_query(schema, "{ securities(group_by: OTHER) { secid } }")
        assert result["data"] is None
        assert result["errors"]
        client.fetch_data.assert_not_called()

    def test_enum_variable_rejected_before_resolving(self, schema_and_client):
        schema, client = schema_and_client
        result = execute_query(
            schema,
            "query ($g: GroupBy) { securities(group_by: $g) { secid } }",
            variables={"g": "OTHER"},
        )
        assert result["errors"]
        client.fetch_data.assert_not_called()
