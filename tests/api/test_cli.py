"""Tests for the terminal report client."""

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from recalc.api.app import app
from recalc.cli import build_parser, build_request, fetch_report, main, print_report


def _args(*argv: str):
    return build_parser().parse_args(list(argv))


class TestBuildRequest:
    def test_calculation(self):
        path, payload = build_request(_args("--price", "2800000000", "--equity", "1000000000", "--term-years", "25"))
        assert path == "/api/v1/calculate"
        assert payload == {
            "inputs": {"price": "2800000000", "cash_equity": "1000000000", "loan_term_years": 25},
            "strict": False,
        }

    def test_sale_analysis(self):
        path, payload = build_request(_args("--price", "3000000000", "--hold-months", "60", "--strict"))
        assert path == "/api/v1/sale-analysis"
        assert payload["holding_period"] == {"holding_months": 60, "appreciation_rate": "5"}
        assert payload["strict"] is True

    def test_price_required(self):
        with pytest.raises(SystemExit):
            _args("--rent", "1000")


class TestFetchReport:
    def test_posts_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        resp = asyncio.run(fetch_report(
            "http://calc.test", "/api/v1/calculate", {"inputs": {"price": "1"}},
            transport=httpx.MockTransport(handler),
        ))
        assert resp.status_code == 200
        assert seen["url"] == "http://calc.test/api/v1/calculate"
        assert seen["body"] == {"inputs": {"price": "1"}}


class TestPrintReport:
    def test_full_report(self, capsys, debt_free_break_even_raw):
        client = TestClient(app)
        data = client.post(
            "/api/v1/sale-analysis",
            json={"inputs": debt_free_break_even_raw, "holding_period": {"holding_months": 60}},
        ).json()

        print_report(data)
        out = capsys.readouterr().out
        assert "Cash Flow Steps" in out
        assert "Projected Value:      3,828,844,688" in out
        assert "Payback:              not within the loan term" in out
        assert "offers the best ROI" in out

    def test_advice_sections(self, capsys, high_ltv_no_rent_raw):
        data = TestClient(app).post("/api/v1/calculate", json={"inputs": high_ltv_no_rent_raw}).json()

        print_report(data)
        out = capsys.readouterr().out
        assert "Warnings" in out
        assert "Suggestions" in out
        assert "Projected Value" not in out


class TestMain:
    def test_unreachable_api(self, capsys):
        code = asyncio.run(main(["--price", "1000000", "--api-url", "http://127.0.0.1:9"]))
        assert code == 1
        assert "Could not connect" in capsys.readouterr().err
