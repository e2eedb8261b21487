"""Unit tests for repositories/base.py, exercised through concrete repositories."""

import uuid
from datetime import datetime

import pytest

from db.pagination import PageRequest, Sort
from errors import EntityNotFoundError, ValidationError
from models.business_component import BusinessComponent
from models.user import User
from repositories.business_component_repo import BusinessComponentRepository
from repositories.user_repo import UserRepository
from tests.conftest import RecordingExecutor

DEMO_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


def _component_row(**overrides):
    row = {
        "id": DEMO_ID,
        "name": "demo",
        "description": None,
        "contact_email": None,
        "contact_phone": None,
        "created_at": datetime(2024, 1, 1, 9, 0),
        "updated_at": datetime(2024, 1, 1, 9, 0),
    }
    row.update(overrides)
    return row


@pytest.fixture
def components(recorder):
    return BusinessComponentRepository(recorder)


@pytest.fixture
def users(recorder):
    return UserRepository(recorder)


# --- reads ---

def test_find_by_id_maps_row_and_keeps_null_as_none(components, recorder):
    recorder.script(_component_row())

    found = components.find_by_id(DEMO_ID)

    assert found.id == DEMO_ID
    assert found.name == "demo"
    assert found.description is None
    kind, sql, params = recorder.calls[0]
    assert kind == "query_for_optional"
    assert sql == "SELECT * FROM business_components WHERE id = %s"
    assert params == (DEMO_ID,)


def test_find_by_id_absent_is_none(components, recorder):
    assert components.find_by_id(uuid.uuid4()) is None


def test_get_by_id_absent_raises(components):
    with pytest.raises(EntityNotFoundError) as info:
        components.get_by_id(DEMO_ID)
    assert info.value.context["table"] == "business_components"


def test_exists_by_id(components, recorder):
    recorder.script(1, 0)
    assert components.exists_by_id(DEMO_ID) is True
    assert components.exists_by_id(DEMO_ID) is False
    assert recorder.sql_of("count")[0] == "SELECT COUNT(*) FROM business_components WHERE id = %s"


def test_find_all_uses_default_sort(users, recorder):
    users.find_all()
    assert recorder.sql_of("query_for_list") == ["SELECT * FROM users ORDER BY username ASC"]


def test_find_all_by_id_empty_skips_query(users, recorder):
    assert users.find_all_by_id([]) == []
    assert recorder.calls == []


def test_find_all_by_id_uses_in_list(users, recorder):
    ids = [uuid.uuid4(), uuid.uuid4()]
    users.find_all_by_id(ids)
    kind, sql, params = recorder.calls[0]
    assert sql == "SELECT * FROM users WHERE id IN (%s, %s)"
    assert params == tuple(ids)


def test_find_page_counts_then_selects(components, recorder):
    recorder.script(25, [_component_row(name=f"c{i}") for i in range(5)])

    page = components.find_page(PageRequest.of(2, 10, Sort.by("name")))

    assert [c[0] for c in recorder.calls] == ["count", "query_for_list"]
    assert recorder.sql_of("query_for_list")[0].endswith("ORDER BY name ASC, id ASC LIMIT 10 OFFSET 20")
    assert len(page.content) == 5
    assert page.total_elements == 25


def test_find_page_rejects_unmapped_sort(components, recorder):
    recorder.script(5)
    with pytest.raises(ValidationError):
        components.find_page(PageRequest.of(0, 10, Sort.by("contact_phone")))


# --- writes ---

def test_save_new_entity_inserts_with_generated_id_and_timestamps(users, recorder):
    recorder.script(0)
    user = User(username="ana", email="ana@example.com")

    saved = users.save(user)

    assert isinstance(saved.id, uuid.UUID)
    assert saved.created_at is not None
    assert saved.updated_at is not None
    kind, sql, params = recorder.calls[-1]
    assert kind == "update"
    assert sql.startswith("INSERT INTO users (id, username, email, first_name")
    assert sql.count("%s") == len(params)
    assert params[0] == saved.id
    assert params[1] == "ana"


def test_save_existing_entity_updates_by_id(users, recorder):
    recorder.script(1)
    created = datetime(2023, 1, 1)
    user = User(username="ana", email="ana@example.com", id=uuid.uuid4(), created_at=created)

    users.save(user)

    kind, sql, params = recorder.calls[-1]
    assert sql.startswith("UPDATE users SET username = %s")
    assert sql.endswith("WHERE id = %s")
    assert "created_at" not in sql
    assert params[-1] == user.id
    assert user.created_at == created
    assert user.updated_at is not None


def test_upsert_is_single_statement(components, recorder):
    component = BusinessComponent(name="demo", id=DEMO_ID)

    components.upsert(component)

    assert len(recorder.calls) == 1
    kind, sql, params = recorder.calls[0]
    assert "ON CONFLICT (id) DO UPDATE SET name = EXCLUDED.name" in sql
    assert "created_at = EXCLUDED.created_at" not in sql
    assert params[0] == DEMO_ID


def test_upsert_requires_postgresql():
    repo = BusinessComponentRepository(RecordingExecutor(dialect="ansi"))
    with pytest.raises(ValidationError):
        repo.upsert(BusinessComponent(name="demo"))


def test_delete_by_id_reports_whether_a_row_went(components, recorder):
    recorder.script(1, 0)
    assert components.delete_by_id(DEMO_ID) is True
    assert components.delete_by_id(DEMO_ID) is False
    assert recorder.sql_of("update")[0] == "DELETE FROM business_components WHERE id = %s"


def test_generate_id_is_unique(users):
    assert users.generate_id() != users.generate_id()


# --- entity queries ---

def test_user_lookups(users, recorder):
    users.find_by_username("ana")
    users.find_by_email("ana@example.com")
    recorder.script(1)
    assert users.exists_by_username("ana") is True
    assert recorder.calls[0][1] == "SELECT * FROM users WHERE username = %s"
    assert recorder.calls[1][1] == "SELECT * FROM users WHERE email = %s"
    assert recorder.calls[2][1] == "SELECT COUNT(*) FROM users WHERE username = %s"


def test_component_search_page_filters_both_statements(components, recorder):
    recorder.script(1, [_component_row()])

    components.search_page("dem", PageRequest.of(0, 10))

    (_, count_sql, count_params), (_, list_sql, list_params) = recorder.calls
    assert count_sql == "SELECT COUNT(*) FROM business_components WHERE name ILIKE %s"
    assert list_sql.startswith("SELECT * FROM business_components WHERE name ILIKE %s ORDER BY name ASC")
    assert count_params == list_params == ("%dem%",)


def test_find_page_orders_unsorted_requests_by_primary_key(users, recorder):
    users.default_sort = None
    recorder.script(3, [])

    users.find_page(PageRequest.of(0, 2))

    assert recorder.sql_of("query_for_list")[0] == "SELECT * FROM users ORDER BY id ASC LIMIT 2 OFFSET 0"
