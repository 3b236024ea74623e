"""Tests for span timing and ServiceResult meta injection."""

from __future__ import annotations

import pytest

from relcore.domain.entities import Account, User
from relcore.infrastructure.store import Store
from relcore.services.result import ServiceResult
from relcore.services.telemetry import (
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    trace_span,
    traced,
)
from relcore.services.vaults import CreateVault


@pytest.fixture
def telemetry():
    enable_telemetry()
    try:
        yield
    finally:
        disable_telemetry()


@traced
def _operation() -> ServiceResult:
    with trace_span("step") as span:
        if span is not None:
            span.annotate("rows", 2)
    return ServiceResult(ok=True, op="sample")


class TestDisabled:
    def test_no_meta(self) -> None:
        disable_telemetry()
        assert _operation().meta is None
        with trace_span("outside") as span:
            assert span is None
        assert get_current_span() is None


@pytest.mark.usefixtures("telemetry")
class TestEnabled:
    def test_span_tree_in_meta(self) -> None:
        result = _operation()
        tree = result.meta["telemetry"]
        assert tree["name"].endswith("_operation")
        assert tree["annotations"] == {"ok": True}
        assert tree["children"][0]["name"] == "step"
        assert tree["children"][0]["annotations"] == {"rows": 2}

    def test_service_run_stages(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        result = CreateVault(store).run(
            {"account_id": account.id, "author_id": admin.id, "name": "Family"}
        )
        assert result.ok
        stages = [child["name"] for child in result.meta["telemetry"]["children"]]
        assert stages == ["validate", "authorize", "handle", "emit"]

    def test_failed_run_still_timed(self, store: Store, tenant: tuple[Account, User]) -> None:
        account, admin = tenant
        result = CreateVault(store).run({"account_id": account.id, "author_id": admin.id})
        assert not result.ok
        stages = [child["name"] for child in result.meta["telemetry"]["children"]]
        assert stages == ["validate"]
