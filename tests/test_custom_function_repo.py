"""Unit tests for repositories/custom_function_repo.py."""

import uuid
from datetime import datetime

import pytest

from models.custom_function import CustomFunction, FunctionLanguage, TestCase
from repositories.custom_function_repo import CustomFunctionRepository

FUNCTION_ID = uuid.uuid4()


def _function_row(**overrides):
    row = {
        "function_id": FUNCTION_ID,
        "name": "toUpper",
        "description": None,
        "category": "string",
        "language": "PYTHON",
        "function_signature": "toUpper(value)",
        "parameters": {"value": {"type": "string"}},
        "function_body": "return value.upper()",
        "is_safe": True,
        "is_public": False,
        "is_built_in": False,
        "version": 2,
        "created_by": "ana",
        "created_at": datetime(2024, 1, 1),
        "updated_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def functions(recorder):
    return CustomFunctionRepository(recorder)


def test_primary_key_column_is_function_id(functions, recorder):
    recorder.script(1)
    assert functions.exists_by_id(FUNCTION_ID) is True
    assert recorder.calls[0][1] == (
        "SELECT COUNT(*) FROM transformation_custom_functions WHERE function_id = %s"
    )


def test_find_by_id_reads_json_and_loads_children(functions, recorder):
    recorder.script(
        _function_row(),
        [{"dependency": "strings"}, {"dependency": "locale"}],
        [{"test_name": "basic", "input_data": "a", "expected_output": "A",
          "test_description": None}],
    )

    function = functions.find_by_id(FUNCTION_ID)

    assert function.id == FUNCTION_ID
    assert function.language is FunctionLanguage.PYTHON
    assert function.parameters == {"value": {"type": "string"}}
    assert function.dependencies == ["strings", "locale"]
    assert function.test_cases == [TestCase("basic", "a", "A", None)]
    loads = recorder.sql_of("query_for_list")
    assert loads[0].endswith("ORDER BY position")
    assert loads[1].endswith("ORDER BY position")


@pytest.mark.parametrize("stored", ["uppercase", 3, True, ["a", "b"]])
def test_scalar_and_list_parameters_read_back_unchanged(functions, recorder, stored):
    recorder.script(_function_row(parameters=stored), [], [])
    assert functions.find_by_id(FUNCTION_ID).parameters == stored


def test_save_writes_ordered_dependencies_and_flat_test_cases(functions, recorder):
    recorder.script(0)
    function = CustomFunction(
        name="toUpper",
        function_body="return value.upper()",
        parameters={"value": {"type": "string"}},
        dependencies=["strings", "locale"],
        test_cases=[TestCase("basic", "a", "A")],
    )

    functions.save(function)

    inserts = [(sql, rows) for kind, sql, rows in recorder.calls if kind == "batch_update"]
    (dep_sql, dep_rows), (case_sql, case_rows) = inserts
    assert dep_sql == (
        "INSERT INTO function_dependencies (function_id, dependency, position) "
        "VALUES (%s, %s, %s)"
    )
    assert dep_rows == [(function.id, "strings", 0), (function.id, "locale", 1)]
    assert case_sql.startswith(
        "INSERT INTO function_test_cases (function_id, test_name, input_data, "
        "expected_output, test_description, position)"
    )
    assert case_rows == [(function.id, "basic", "a", "A", None, 0)]


def test_update_keys_on_function_id(functions, recorder):
    recorder.script(1)
    function = CustomFunction(name="toUpper", id=FUNCTION_ID, created_by="ana")

    functions.save(function)

    owner_sql = [sql for sql in recorder.sql_of("update") if sql.startswith("UPDATE")][0]
    assert owner_sql.endswith("WHERE function_id = %s")
    assert "created_by" not in owner_sql


def test_find_by_category(functions, recorder):
    functions.find_by_category("string")
    _, sql, params = recorder.calls[0]
    assert sql == (
        "SELECT * FROM transformation_custom_functions WHERE category = %s ORDER BY name ASC"
    )
    assert params == ("string",)
