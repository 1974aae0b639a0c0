"""
Typed result helper tests: error categories and payloads.
"""

import pytest

from authgate.api import helpers
from authgate.api.helpers import GENERIC_ERROR, StatusCategory
from authgate.models import (
    LdapMappingCreate,
    LdapMappingUpdate,
    LocalUserCreate,
    LocalUserUpdate,
)


def alice(**overrides) -> LocalUserCreate:
    fields = {"username": "alice", "password": "s3cret", "role": "ops"}
    fields.update(overrides)
    return LocalUserCreate(**fields)


@pytest.mark.asyncio
async def test_local_user_results(engine):
    assert await helpers.get_local_users(engine) == (StatusCategory.OK, [])

    status, payload = await helpers.add_local_user(engine, alice())
    assert status == StatusCategory.CREATED
    assert payload == {"username": "alice", "role": "ops", "disabled": False}

    status, payload = await helpers.update_local_user(
        engine, "alice", LocalUserUpdate(role="admin")
    )
    assert status == StatusCategory.OK
    assert payload["role"] == "admin"

    assert await helpers.delete_local_user(engine, "alice") == (StatusCategory.NO_CONTENT, None)
    assert await helpers.get_local_user(engine, "alice") == (StatusCategory.NOT_FOUND, None)


@pytest.mark.asyncio
async def test_caller_errors_are_bad_requests(bootstrapped_engine):
    engine = bootstrapped_engine
    await helpers.add_local_user(engine, alice())

    cases = [
        await helpers.add_local_user(engine, alice()),
        await helpers.add_local_user(engine, alice(username="bob", role="root")),
        await helpers.delete_local_user(engine, "admin"),
        await helpers.update_local_user(engine, "ops", LocalUserUpdate(disabled=True)),
    ]

    for status, payload in cases:
        assert status == StatusCategory.BAD_REQUEST
        assert set(payload) == {"error"}
        assert payload["error"]


@pytest.mark.asyncio
async def test_not_found_carries_no_payload(engine):
    assert await helpers.update_local_user(engine, "nobody", LocalUserUpdate(role="ops")) == (
        StatusCategory.NOT_FOUND,
        None,
    )
    assert await helpers.delete_ldap_mapping(engine, "eng") == (StatusCategory.NOT_FOUND, None)


@pytest.mark.asyncio
async def test_store_failures_are_internal_errors_with_generic_message(
    failing_engine, failing_driver
):
    failing_driver.fail("write", "/authgate/local_users")

    status, payload = await helpers.add_local_user(failing_engine, alice())

    assert status == StatusCategory.INTERNAL_ERROR
    assert payload == {"error": GENERIC_ERROR}


@pytest.mark.asyncio
async def test_ldap_mapping_results(engine):
    status, payload = await helpers.add_ldap_mapping(
        engine, LdapMappingCreate(group_name="eng", role="ops")
    )
    assert status == StatusCategory.CREATED
    assert payload == {"group_name": "eng", "role": "ops"}

    status, payload = await helpers.update_ldap_mapping(
        engine, "eng", LdapMappingUpdate(role="admin")
    )
    assert (status, payload["role"]) == (StatusCategory.OK, "admin")

    assert await helpers.get_ldap_mappings(engine) == (
        StatusCategory.OK,
        [{"group_name": "eng", "role": "admin"}],
    )
    assert await helpers.get_ldap_mapping(engine, "missing") == (StatusCategory.NOT_FOUND, None)


@pytest.mark.asyncio
async def test_non_utf8_password_is_bad_request(engine, driver):
    status, payload = await helpers.add_local_user(engine, alice(password="\ud800"))
    assert (status, payload) == (
        StatusCategory.BAD_REQUEST,
        {"error": "Password is not valid UTF-8"},
    )

    await helpers.add_local_user(engine, alice())
    writes = driver.write_count

    status, _ = await helpers.update_local_user(
        engine, "alice", LocalUserUpdate(password="\ud800")
    )
    assert status == StatusCategory.BAD_REQUEST
    assert driver.write_count == writes
