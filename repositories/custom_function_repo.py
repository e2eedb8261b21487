"""
repositories/custom_function_repo.py
------------------------------------
Data access layer for transformation custom functions.

`parameters` is a JSON column. Dependencies (ordered) and test cases
are child tables keyed by function_id.
"""

from typing import Optional
from uuid import UUID

from db import columns as col
from db.executor import StatementExecutor
from db.pagination import Sort
from db.sql import Column, Where
from models.custom_function import CustomFunction, FunctionLanguage, TestCase
from repositories.associations import AssociationTable
from repositories.base import BaseRepository


class CustomFunctionRepository(BaseRepository[CustomFunction, UUID]):
    """Repository for transformation_custom_functions."""

    table = "transformation_custom_functions"
    id_column = "function_id"
    columns = (
        Column("function_id", lambda f: f.id, updatable=False),
        Column("name", lambda f: f.name),
        Column("description", lambda f: f.description),
        Column("category", lambda f: f.category),
        Column("language", lambda f: col.enum_value(f.language)),
        Column("function_signature", lambda f: f.function_signature),
        Column("parameters", lambda f: col.to_json(f.parameters)),
        Column("function_body", lambda f: f.function_body),
        Column("is_safe", lambda f: f.is_safe),
        Column("is_public", lambda f: f.is_public),
        Column("is_built_in", lambda f: f.is_built_in),
        Column("version", lambda f: f.version),
        Column("created_by", lambda f: f.created_by, updatable=False),
        Column("created_at", lambda f: col.to_timestamp(f.created_at), updatable=False),
        Column("updated_at", lambda f: col.to_timestamp(f.updated_at)),
    )
    default_sort = Sort.by("name")

    def __init__(self, executor: StatementExecutor):
        super().__init__(executor)
        self.dependencies = AssociationTable(
            executor, "function_dependencies", "function_id", ("dependency",),
            order_column="position",
        )
        self.test_cases = AssociationTable(
            executor,
            "function_test_cases",
            "function_id",
            ("test_name", "input_data", "expected_output", "test_description"),
            order_column="position",
        )

    # ── READ ──────────────────────────────────────────────

    def find_by_name(self, name: str) -> Optional[CustomFunction]:
        return self._query_one(Where().add("name = %s", name))

    def find_by_category(self, category: str) -> list[CustomFunction]:
        return self._query(Where().add("category = %s", category), self.default_sort)

    def find_public(self) -> list[CustomFunction]:
        return self._query(Where().add("is_public = TRUE"), self.default_sort)

    def exists_by_name(self, name: str) -> bool:
        return self._count_where(Where().add("name = %s", name)) > 0

    # ── COLLECTIONS ───────────────────────────────────────

    def _load_children(self, function: CustomFunction) -> CustomFunction:
        function.dependencies = self.dependencies.load(function.id)
        function.test_cases = self.test_cases.load(function.id, self._row_to_test_case)
        return function

    def _save_children(self, function: CustomFunction) -> None:
        self.dependencies.replace(function.id, function.dependencies)
        self.test_cases.replace(
            function.id,
            [
                (t.test_name, t.input_data, t.expected_output, t.test_description)
                for t in function.test_cases
            ],
        )

    def _delete_children(self, function_id: UUID) -> None:
        self.dependencies.delete_all(function_id)
        self.test_cases.delete_all(function_id)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_test_case(row) -> TestCase:
        return TestCase(
            test_name=col.get_str(row, "test_name"),
            input_data=col.get_str(row, "input_data"),
            expected_output=col.get_str(row, "expected_output"),
            test_description=col.get_str(row, "test_description"),
        )

    def map_row(self, row) -> CustomFunction:
        return CustomFunction(
            id=col.get_uuid(row, "function_id"),
            name=col.get_str(row, "name"),
            description=col.get_str(row, "description"),
            category=col.get_str(row, "category"),
            language=col.get_enum(row, "language", FunctionLanguage),
            function_signature=col.get_str(row, "function_signature"),
            parameters=col.get_json(row, "parameters"),
            function_body=col.get_str(row, "function_body") or "",
            is_safe=bool(col.get_bool(row, "is_safe")),
            is_public=bool(col.get_bool(row, "is_public")),
            is_built_in=bool(col.get_bool(row, "is_built_in")),
            version=col.get_int(row, "version") or 1,
            created_by=col.get_str(row, "created_by"),
            created_at=col.get_datetime(row, "created_at"),
            updated_at=col.get_datetime(row, "updated_at"),
        )
