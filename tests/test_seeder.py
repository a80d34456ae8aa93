"""Tests for fixture seeding."""
import pytest

from sproc_explain.errors import SeedingError, SetupError
from sproc_explain.fixtures.seeder import (
    DELETE_ACCOUNT_RESET_TOKENS,
    DELETE_PASSWORD_CHANGE_TOKENS,
    DELETE_PASSWORD_FORGOT_TOKEN,
    DELETE_PASSWORD_FORGOT_TOKENS,
    INSERT_ACCOUNT,
    INSERT_ACCOUNT_RESET_TOKEN,
    INSERT_DEVICE,
    INSERT_EMAIL,
    INSERT_KEY_FETCH_TOKEN,
    INSERT_PASSWORD_CHANGE_TOKEN,
    INSERT_PASSWORD_FORGOT_TOKEN,
    INSERT_SESSION_TOKEN,
    INSERT_UNVERIFIED_TOKEN,
    FixtureSeeder,
)
from sproc_explain.procedures.registry import PlaceholderRegistry

STATEMENTS_PER_ACCOUNT = 16


@pytest.mark.asyncio
async def test_seed_creates_records(fake_planner_factory):
    db = fake_planner_factory()
    registry = PlaceholderRegistry.with_defaults()

    await FixtureSeeder(db, registry, record_count=3).seed()

    assert len(db.statements) == 3 * STATEMENTS_PER_ACCOUNT
    accounts = [params for sql, params in db.statements if sql == INSERT_ACCOUNT]
    assert len(accounts) == 3
    assert len({params[0] for params in accounts}) == 3


@pytest.mark.asyncio
async def test_first_records_become_known_args(fake_planner_factory):
    """Known args come from the first seeded account only."""
    db = fake_planner_factory()
    registry = PlaceholderRegistry.with_defaults()

    await FixtureSeeder(db, registry, record_count=2).seed()

    first_account = next(params for sql, params in db.statements if sql == INSERT_ACCOUNT)
    first_session = next(params for sql, params in db.statements if sql == INSERT_SESSION_TOKEN)
    first_device = next(params for sql, params in db.statements if sql == INSERT_DEVICE)

    assert registry["uid"] == first_account[0]
    assert registry["normalizedemail"] == first_account[1]
    assert registry["email"] == first_account[2]
    assert registry["emailcode"] == first_account[3]
    assert registry["sessiontokenid"] == first_session[0]
    assert registry["tokenid"] == first_session[0]
    assert registry["deviceid"] == first_device[1]
    assert registry["id"] == first_device[1]
    assert isinstance(registry["tokenverificationid"], bytes)
    assert registry["uid"] != [params for sql, params in db.statements if sql == INSERT_ACCOUNT][1][0]


@pytest.mark.asyncio
async def test_tokens_share_the_session_token_id(fake_planner_factory):
    db = fake_planner_factory()

    await FixtureSeeder(db, PlaceholderRegistry.with_defaults(), record_count=1).seed()

    session_token_id = next(params for sql, params in db.statements if sql == INSERT_SESSION_TOKEN)[0]
    reset_token_id = next(params for sql, params in db.statements if sql == INSERT_ACCOUNT_RESET_TOKEN)[0]
    assert reset_token_id == session_token_id


@pytest.mark.asyncio
async def test_session_token_uses_known_user_agent(fake_planner_factory):
    db = fake_planner_factory()

    await FixtureSeeder(db, PlaceholderRegistry.with_defaults(), record_count=1).seed()

    params = next(params for sql, params in db.statements if sql == INSERT_SESSION_TOKEN)
    assert params[4:9] == ("foo", "bar", "baz", "qux", "mobile")


@pytest.mark.asyncio
async def test_statement_order_for_one_account(fake_planner_factory):
    """One-per-uid token tables are cleared before each insert."""
    db = fake_planner_factory()

    await FixtureSeeder(db, PlaceholderRegistry.with_defaults(), record_count=1).seed()

    assert [sql for sql, params in db.statements] == [
        INSERT_ACCOUNT,
        INSERT_EMAIL,
        INSERT_EMAIL,
        INSERT_SESSION_TOKEN,
        INSERT_UNVERIFIED_TOKEN,
        INSERT_DEVICE,
        INSERT_KEY_FETCH_TOKEN,
        DELETE_PASSWORD_CHANGE_TOKENS,
        INSERT_PASSWORD_CHANGE_TOKEN,
        DELETE_PASSWORD_FORGOT_TOKENS,
        INSERT_PASSWORD_FORGOT_TOKEN,
        DELETE_PASSWORD_FORGOT_TOKENS,
        INSERT_PASSWORD_FORGOT_TOKEN,
        DELETE_PASSWORD_FORGOT_TOKEN,
        DELETE_ACCOUNT_RESET_TOKENS,
        INSERT_ACCOUNT_RESET_TOKEN,
    ]
    uid = db.statements[0][1][0]
    for sql in (DELETE_PASSWORD_CHANGE_TOKENS, DELETE_PASSWORD_FORGOT_TOKENS, DELETE_ACCOUNT_RESET_TOKENS):
        assert (sql, (uid,)) in db.statements


@pytest.mark.asyncio
async def test_account_has_primary_email(fake_planner_factory):
    db = fake_planner_factory()

    await FixtureSeeder(db, PlaceholderRegistry.with_defaults(), record_count=1).seed()

    account = db.statements[0][1]
    emails = [params for sql, params in db.statements if sql == INSERT_EMAIL]
    primary = [params for params in emails if params[5] is True]
    assert len(emails) == 2
    assert len(primary) == 1
    assert primary[0][:4] == (account[1], account[2], account[0], account[3])

class FailingDatabase:
    async def execute(self, sql, params=()):
        raise RuntimeError("Table 'fxa.accounts' doesn't exist")


@pytest.mark.asyncio
async def test_failure_is_fatal():
    with pytest.raises(SeedingError) as exc_info:
        await FixtureSeeder(FailingDatabase(), PlaceholderRegistry(), record_count=1).seed()

    assert isinstance(exc_info.value, SetupError)
    assert "doesn't exist" in str(exc_info.value)
