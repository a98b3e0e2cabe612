"""
Tests for the persistence gateway against an in-memory sqlite store.
"""

import pytest
import pytest_asyncio
from datetime import date
from unittest.mock import AsyncMock

from cfo_helper.gateway import analytics, chat, finance, users
from cfo_helper.gateway.result import GatewayResult


USER_ID = "user_test_123"


@pytest_asyncio.fixture
async def profile(db):
    result = await users.get_or_create_profile(db, USER_ID, "founder@example.com", {"full_name": "Test Founder"})
    assert result.success
    return result.data


# =============================================================================
# GatewayResult
# =============================================================================

class TestGatewayResult:

    def test_ok(self):
        result = GatewayResult.ok([1, 2])
        assert result.success is True
        assert result.data == [1, 2]
        assert result.error is None

    def test_fail_from_exception(self):
        result = GatewayResult.fail(RuntimeError("connection refused"))
        assert result.success is False
        assert result.data is None
        assert result.error == "connection refused"


# =============================================================================
# Profiles
# =============================================================================

class TestProfiles:
    """Tests for the user profile gateway."""

    def test_profile_from_metadata(self):
        fields = users.profile_from_metadata("u1", "a@b.com", {
            "name": "Ada",
            "organizationData": {
                "companyName": "Acme",
                "industry": "SaaS",
                "organizationType": "startup",
                "teamSize": 8,
            },
        })

        assert fields == {
            "id": "u1",
            "email": "a@b.com",
            "full_name": "Ada",
            "company_name": "Acme",
            "industry": "SaaS",
            "organization_type": "startup",
            "team_size": 8,
        }

    def test_profile_from_empty_metadata(self):
        fields = users.profile_from_metadata("u1", "a@b.com", None)
        assert fields["full_name"] is None
        assert fields["organization_type"] is None

    @pytest.mark.asyncio
    async def test_get_or_create_is_idempotent(self, db):
        first = await users.get_or_create_profile(db, USER_ID, "founder@example.com", {
            "full_name": "Test Founder",
            "organizationData": {"organizationType": "event", "teamSize": 3},
        })
        second = await users.get_or_create_profile(db, USER_ID, "other@example.com", {"full_name": "Someone Else"})

        assert first.success and second.success
        assert second.data.id == first.data.id
        assert second.data.email == "founder@example.com"
        assert second.data.full_name == "Test Founder"
        assert second.data.organization_type == "event"
        assert second.data.team_size == 3

    @pytest.mark.asyncio
    async def test_get_profile_missing(self, db):
        result = await users.get_profile(db, "nobody")
        assert result.success
        assert result.data is None

    @pytest.mark.asyncio
    async def test_update_profile(self, db, profile):
        result = await users.update_profile(db, USER_ID, {"company_name": "Acme", "password": "ignored"})

        assert result.success
        assert result.data.company_name == "Acme"
        assert not hasattr(result.data, "password")

    @pytest.mark.asyncio
    async def test_update_missing_profile_fails(self, db):
        result = await users.update_profile(db, "nobody", {"company_name": "Acme"})
        assert not result.success
        assert "not found" in result.error

    @pytest.mark.asyncio
    async def test_store_errors_become_results(self):
        broken = AsyncMock()
        broken.get.side_effect = RuntimeError("connection refused")

        result = await users.get_or_create_profile(broken, USER_ID, "a@b.com")

        assert not result.success
        assert result.error == "connection refused"
        broken.rollback.assert_awaited_once()


# =============================================================================
# Financial data
# =============================================================================

class TestFinancialData:
    """Tests for the financial snapshot gateway."""

    @pytest.mark.asyncio
    async def test_empty(self, db, profile):
        result = await finance.get_financial_data(db, USER_ID)
        assert result.success
        assert result.data is None

    @pytest.mark.asyncio
    async def test_save_inserts_then_updates(self, db, profile):
        first = await finance.save_financial_data(db, USER_ID, {"current_funds": 5000000, "employees": 5})
        second = await finance.save_financial_data(db, USER_ID, {"current_funds": 4000000, "bogus": 1})

        assert first.success and second.success
        assert second.data.id == first.data.id
        assert second.data.current_funds == 4000000
        assert second.data.employees == 5

        latest = await finance.get_financial_data(db, USER_ID)
        assert latest.data.current_funds == 4000000


# =============================================================================
# Simulations
# =============================================================================

class TestSimulations:
    """Tests for saved simulation runs."""

    @pytest.mark.asyncio
    async def test_save_list_delete(self, db, profile):
        saved = await finance.save_simulation(
            db,
            USER_ID,
            name="Hire two",
            inputs={"employees": 7},
            results={"revenue": 299900.0, "runway": None},
            description="Two more engineers",
        )
        assert saved.success
        assert saved.data.id.startswith("sim_")
        assert saved.data.results["runway"] is None

        listed = await finance.list_simulations(db, USER_ID)
        assert [s.name for s in listed.data] == ["Hire two"]

        deleted = await finance.delete_simulation(db, USER_ID, saved.data.id)
        assert deleted.success
        assert (await finance.list_simulations(db, USER_ID)).data == []

    @pytest.mark.asyncio
    async def test_delete_is_scoped_to_user(self, db, profile):
        saved = await finance.save_simulation(db, USER_ID, name="Mine", inputs={}, results={})

        await finance.delete_simulation(db, "someone_else", saved.data.id)

        assert len((await finance.list_simulations(db, USER_ID)).data) == 1


# =============================================================================
# Transactions
# =============================================================================

class TestTransactions:
    """Tests for the transaction gateway."""

    @pytest.mark.asyncio
    async def test_add_and_list_newest_first(self, db, profile):
        await finance.add_transaction(db, USER_ID, {"type": "income", "amount": 1000, "date": date(2025, 1, 5)})
        await finance.add_transaction(db, USER_ID, {"type": "expense", "amount": 400, "date": date(2025, 2, 5)})

        result = await finance.list_transactions(db, USER_ID)

        assert result.success
        assert [t.date for t in result.data] == [date(2025, 2, 5), date(2025, 1, 5)]

    @pytest.mark.asyncio
    async def test_list_respects_limit(self, db, profile):
        for day in range(1, 6):
            await finance.add_transaction(db, USER_ID, {"type": "income", "amount": day, "date": date(2025, 3, day)})

        result = await finance.list_transactions(db, USER_ID, limit=2)
        assert [t.date.day for t in result.data] == [5, 4]

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(self, db, profile):
        for day in (1, 10, 20, 31):
            await finance.add_transaction(db, USER_ID, {"type": "expense", "amount": 1, "date": date(2025, 1, day)})

        result = await finance.list_transactions_by_date_range(db, USER_ID, date(2025, 1, 10), date(2025, 1, 20))

        assert sorted(t.date.day for t in result.data) == [10, 20]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, db, profile):
        added = await finance.add_transaction(db, USER_ID, {"type": "income", "amount": 100, "date": date(2025, 1, 1)})

        updated = await finance.update_transaction(db, USER_ID, added.data.id, {"amount": 250, "category": "sales"})
        assert updated.success
        assert updated.data.amount == 250
        assert updated.data.category == "sales"

        assert (await finance.delete_transaction(db, USER_ID, added.data.id)).success
        assert (await finance.list_transactions(db, USER_ID)).data == []

    @pytest.mark.asyncio
    async def test_update_missing_transaction(self, db, profile):
        result = await finance.update_transaction(db, USER_ID, "txn_missing", {"amount": 1})
        assert not result.success
        assert result.error.endswith("not found")

    @pytest.mark.asyncio
    async def test_update_other_users_transaction(self, db, profile):
        added = await finance.add_transaction(db, USER_ID, {"type": "income", "amount": 100, "date": date(2025, 1, 1)})

        result = await finance.update_transaction(db, "someone_else", added.data.id, {"amount": 1})

        assert not result.success


# =============================================================================
# Monthly reports and chat history
# =============================================================================

class TestMonthlyReports:

    @pytest.mark.asyncio
    async def test_net_profit_is_derived(self, db, profile):
        result = await finance.save_monthly_report(db, USER_ID, month=3, year=2025, total_revenue=1200, total_expenses=800)

        assert result.success
        assert result.data.net_profit == 400

    @pytest.mark.asyncio
    async def test_list_most_recent_first(self, db, profile):
        await finance.save_monthly_report(db, USER_ID, month=12, year=2024, total_revenue=1, total_expenses=1)
        await finance.save_monthly_report(db, USER_ID, month=2, year=2025, total_revenue=1, total_expenses=1)
        await finance.save_monthly_report(db, USER_ID, month=1, year=2025, total_revenue=1, total_expenses=1)

        result = await finance.list_monthly_reports(db, USER_ID)

        assert [(r.year, r.month) for r in result.data] == [(2025, 2), (2025, 1), (2024, 12)]


class TestChatHistory:

    @pytest.mark.asyncio
    async def test_save_and_read_session(self, db, profile):
        await chat.save_chat_message(db, USER_ID, "s1", "What is my runway?", True, {"time_horizon": 5})
        await chat.save_chat_message(db, USER_ID, "s1", "About five months.", False)
        await chat.save_chat_message(db, USER_ID, "s2", "Other session", True)

        result = await chat.get_chat_history(db, USER_ID, "s1")

        assert result.success
        assert {m.message for m in result.data} == {"What is my runway?", "About five months."}
        user_turn = next(m for m in result.data if m.is_user)
        assert user_turn.financial_context == {"time_horizon": 5}


# =============================================================================
# Summary
# =============================================================================

class TestAnalytics:

    @pytest.mark.asyncio
    async def test_financial_summary(self, db, profile):
        await finance.save_financial_data(db, USER_ID, {"current_funds": 1000})
        await finance.save_simulation(db, USER_ID, name="A", inputs={}, results={})
        await finance.add_transaction(db, USER_ID, {"type": "income", "amount": 500, "date": date(2025, 1, 1)})
        await finance.add_transaction(db, USER_ID, {"type": "expense", "amount": 200, "date": date(2025, 1, 2)})
        await finance.add_transaction(db, USER_ID, {"type": "investment", "amount": 999, "date": date(2025, 1, 3)})

        result = await analytics.get_financial_summary(db, USER_ID)

        assert result.success
        summary = result.data
        assert summary["financial_data"].current_funds == 1000
        assert summary["simulation_count"] == 1
        assert len(summary["recent_transactions"]) == 3
        assert summary["cash_flow_summary"] == {
            "total_income": 500,
            "total_expenses": 200,
            "net_cash_flow": 300,
        }

    @pytest.mark.asyncio
    async def test_check_connection(self, db):
        result = await analytics.check_connection(db)
        assert result.success
        assert result.data is True

    @pytest.mark.asyncio
    async def test_check_connection_failure(self):
        broken = AsyncMock()
        broken.execute.side_effect = RuntimeError("timeout")

        result = await analytics.check_connection(broken)

        assert not result.success
        assert result.error == "timeout"
