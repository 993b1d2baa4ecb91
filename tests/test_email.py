"""
Tests for the email dispatcher, the email templates and the relay handler.
"""

import asyncio
import datetime
import json
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from core.config import settings
from models.alerts import BudgetExceededAlert, CategorySpend, LargeExpenseAlert
from models.report import GoalSnapshot, WeeklyReport
from services import email_service
from services.relay_service import CORS_HEADERS, handle_relay_request


def make_client(response=None, error=None):
    """AsyncClient class mock whose context-managed instance posts `response`."""
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=error)
    client_cls = MagicMock()
    client_cls.return_value.__aenter__ = AsyncMock(return_value=client)
    client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return client_cls, client


def large_alert(**overrides):
    data = dict(
        amount=Decimal("350"),
        category="Food",
        description="Birthday dinner",
        date=datetime.date(2024, 3, 15),
        threshold=Decimal("300"),
        overspent=Decimal("50"),
    )
    data.update(overrides)
    return LargeExpenseAlert(**data)


def budget_alert():
    return BudgetExceededAlert(
        total_monthly=Decimal("1250"),
        limit=Decimal("1000"),
        overspent_amount=Decimal("250"),
        top_categories=[
            CategorySpend(category="Bills", amount=Decimal("800")),
            CategorySpend(category="Food", amount=Decimal("450")),
        ],
    )


def weekly_report():
    return WeeklyReport(
        period_start=datetime.date(2024, 3, 8),
        period_end=datetime.date(2024, 3, 15),
        total_income=Decimal("500"),
        total_expenses=Decimal("600"),
        savings=Decimal("-100"),
        savings_rate=-20.0,
        category_ranking=[CategorySpend(category="Bills", amount=Decimal("400"))],
        goals=[GoalSnapshot(
            id="g1", title="Laptop", current_amount=Decimal("250"), target_amount=Decimal("1000"),
            target_date=datetime.date(2024, 12, 31), progress=25.0,
        )],
    )


class TestSendEmail:

    def test_success_posts_to_relay(self):
        client_cls, client = make_client(httpx.Response(200, json={"success": True}))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email("a@b.com", "Hi", "<p>x</p>")) is True

        args, kwargs = client.post.call_args
        assert args[0] == settings.EMAIL_RELAY_URL
        assert kwargs["json"] == {"to": "a@b.com", "subject": "Hi", "html": "<p>x</p>"}

    def test_relay_error_returns_false(self):
        client_cls, _ = make_client(httpx.Response(403, json={"success": False, "error": "domain not verified"}))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email("a@b.com", "Hi", "x")) is False

    def test_success_flag_required(self):
        client_cls, _ = make_client(httpx.Response(200, json={"success": False}))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email("a@b.com", "Hi", "x")) is False

    def test_non_json_response_returns_false(self):
        client_cls, _ = make_client(httpx.Response(502, text="Bad gateway"))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email("a@b.com", "Hi", "x")) is False

    @pytest.mark.parametrize("content", [b'["ok"]', b'"ok"', b"null", b"1"])
    def test_non_object_json_returns_false(self, content):
        client_cls, _ = make_client(httpx.Response(200, content=content))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email("a@b.com", "Hi", "x")) is False

    def test_transport_error_returns_false(self):
        client_cls, _ = make_client(error=httpx.ConnectError("connection refused"))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email("a@b.com", "Hi", "x")) is False

    def test_missing_recipient_skips_request(self):
        client_cls, client = make_client(httpx.Response(200, json={"success": True}))
        with patch("services.email_service.httpx.AsyncClient", client_cls):
            assert asyncio.run(email_service.send_email(None, "Hi", "x")) is False
        client.post.assert_not_called()


class TestTemplates:

    def test_large_expense_subject(self):
        assert email_service.large_expense_subject(large_alert()) == "⚠️ Large Food Expense - ₹350.00"

    def test_large_expense_body(self):
        html = email_service.render_large_expense_alert(large_alert())
        assert "₹350.00" in html
        assert "Birthday dinner" in html
        assert "15/03/2024" in html
        assert "₹300.00" in html
        assert "₹50.00" in html

    def test_large_expense_without_description(self):
        html = email_service.render_large_expense_alert(large_alert(description=None))
        assert "No description provided" in html

    def test_description_is_escaped(self):
        html = email_service.render_large_expense_alert(large_alert(description="<script>x</script>"))
        assert "<script>x</script>" not in html

    def test_budget_alert_body(self):
        html = email_service.render_budget_alert(budget_alert())
        assert "₹1000.00" in html
        assert "₹1250.00" in html
        assert "₹250.00" in html
        assert "25.0%" in html
        assert html.index("Bills") < html.index("Food")

    def test_weekly_report_body(self):
        html = email_service.render_weekly_report(weekly_report())
        assert "2024-03-08" in html
        assert "₹-100.00" in html
        assert "-20.0%" in html
        assert "Laptop" in html
        assert "66.7%" in html

    def test_send_alert_dispatches_by_kind(self):
        with patch("services.email_service.send_email", new_callable=AsyncMock) as send:
            send.return_value = True
            asyncio.run(email_service.send_alert("a@b.com", budget_alert()))
            asyncio.run(email_service.send_alert("a@b.com", large_alert()))

        subjects = [c.args[1] for c in send.call_args_list]
        assert subjects == [email_service.BUDGET_ALERT_SUBJECT, "⚠️ Large Food Expense - ₹350.00"]

    def test_send_weekly_report_subject(self):
        with patch("services.email_service.send_email", new_callable=AsyncMock) as send:
            send.return_value = True
            assert asyncio.run(email_service.send_weekly_report("a@b.com", weekly_report())) is True
        assert send.call_args.args[1] == "📊 Your Weekly Financial Report - EduWallet"


class TestRelayHandler:

    BODY = json.dumps({"to": "a@b.com", "subject": "Hi", "html": "<p>x</p>"})

    @pytest.fixture(autouse=True)
    def resend_key(self):
        with patch.object(settings, "RESEND_API_KEY", "re_test_key"):
            yield

    def test_options_preflight(self):
        response = asyncio.run(handle_relay_request("OPTIONS", None))
        assert response.status_code == 200
        assert response.body == ""
        assert response.headers == CORS_HEADERS

    def test_other_methods_rejected(self):
        response = asyncio.run(handle_relay_request("GET", None))
        assert response.status_code == 405
        assert json.loads(response.body) == {"error": "Method not allowed"}
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_post_forwards_to_resend(self):
        client_cls, client = make_client(httpx.Response(200, json={"id": "msg_123"}))
        with patch("services.relay_service.httpx.AsyncClient", client_cls):
            response = asyncio.run(handle_relay_request("POST", self.BODY))

        assert response.status_code == 200
        assert json.loads(response.body) == {
            "success": True,
            "message": "Email sent successfully",
            "data": {"id": "msg_123"},
        }
        args, kwargs = client.post.call_args
        assert args[0] == settings.RESEND_API_URL
        assert kwargs["json"] == {
            "from": settings.EMAIL_FROM,
            "to": ["a@b.com"],
            "subject": "Hi",
            "html": "<p>x</p>",
        }
        assert kwargs["headers"]["Authorization"] == "Bearer re_test_key"

    def test_upstream_status_is_mirrored(self):
        client_cls, _ = make_client(httpx.Response(422, json={"message": "Invalid `to` field"}))
        with patch("services.relay_service.httpx.AsyncClient", client_cls):
            response = asyncio.run(handle_relay_request("POST", self.BODY))
        assert response.status_code == 422
        assert json.loads(response.body) == {"success": False, "error": "Invalid `to` field"}

    def test_upstream_failure_without_message(self):
        client_cls, _ = make_client(httpx.Response(500, text="oops"))
        with patch("services.relay_service.httpx.AsyncClient", client_cls):
            response = asyncio.run(handle_relay_request("POST", self.BODY))
        assert response.status_code == 500
        assert json.loads(response.body)["error"] == "Failed to send email"

    def test_bad_json_is_500(self):
        response = asyncio.run(handle_relay_request("POST", "{not json"))
        assert response.status_code == 500
        assert json.loads(response.body)["success"] is False

    def test_missing_field_is_500(self):
        response = asyncio.run(handle_relay_request("POST", json.dumps({"to": "a@b.com"})))
        assert response.status_code == 500

    def test_transport_error_is_500(self):
        client_cls, _ = make_client(error=httpx.ConnectTimeout("timed out"))
        with patch("services.relay_service.httpx.AsyncClient", client_cls):
            response = asyncio.run(handle_relay_request("POST", self.BODY))
        assert response.status_code == 500
        assert json.loads(response.body) == {"success": False, "error": "timed out"}

    def test_missing_api_key_is_500_without_request(self):
        client_cls, client = make_client(httpx.Response(200, json={"id": "msg_123"}))
        with patch.object(settings, "RESEND_API_KEY", None), \
                patch("services.relay_service.httpx.AsyncClient", client_cls):
            response = asyncio.run(handle_relay_request("POST", self.BODY))
        assert response.status_code == 500
        assert json.loads(response.body) == {"success": False, "error": "Email relay is not configured"}
        client.post.assert_not_called()
