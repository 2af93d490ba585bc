"""End-to-end tests for the wizard HTTP endpoints."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from tests.doubles import RecordingSend
from wizard_output.core.app.application_factory import build_app
from wizard_output.core.common.exceptions import LateRedirectError
from wizard_output.core.config.app_config import AppConfig
from wizard_output.core.interfaces.wizard_step_interface import IWizardStep
from wizard_output.core.services.response_buffer import ResponseBuffer
from wizard_output.core.services.wizard_step_registry import WizardStepRegistry


class LateRedirectStep(IWizardStep):
    @property
    def name(self) -> str:
        return "late-redirect"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        await output.append("<p>A</p>")
        output.request_redirect("/steps/elsewhere")


class BadTargetStep(IWizardStep):
    @property
    def name(self) -> str:
        return "bad-target"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        output.request_redirect("")


class UnicodeRedirectStep(IWizardStep):
    @property
    def name(self) -> str:
        return "unicode-redirect"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        output.request_redirect("/steps/日本")


class BrokenStep(IWizardStep):
    @property
    def name(self) -> str:
        return "broken"

    async def execute(self, output: ResponseBuffer, request: Request) -> None:
        raise KeyError("missing setting")


def _http_scope(path: str) -> dict[str, Any]:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode("ascii"),
        "root_path": "",
        "query_string": b"",
        "headers": [(b"host", b"testserver")],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
    }


async def _receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@pytest.fixture
def failing_client(test_config: AppConfig) -> TestClient:
    registry = WizardStepRegistry()
    for step in (
        LateRedirectStep(),
        BadTargetStep(),
        UnicodeRedirectStep(),
        BrokenStep(),
    ):
        registry.register_step(step)
    client = TestClient(
        build_app(test_config, registry),
        raise_server_exceptions=False,
        follow_redirects=False,
    )
    with client:
        yield client


class TestBuiltinSteps:
    def test_root_redirects_to_first_step(self, test_client: TestClient) -> None:
        response = test_client.get("/")

        assert response.status_code == 307
        assert response.headers["location"] == "/steps/welcome"

    def test_welcome_renders_full_page(self, test_client: TestClient) -> None:
        response = test_client.get("/steps/welcome")

        assert response.status_code == 200
        assert response.headers["content-type"] == "text/html; charset=utf-8"
        assert response.headers["x-frame-options"] == "DENY"
        body = response.text
        assert body.startswith("<!DOCTYPE html>")
        assert "<h1>Test wizard</h1>" in body
        assert body.index("<h1>Test wizard</h1>") < body.index("Welcome to the")
        assert body.index("Welcome to the") < body.index('<div id="wizard-panel">')
        assert '<div class="portal"><div class="body"><b>Links</b></div></div>' in body
        assert body.endswith("</body></html>")
        assert body.count("<!DOCTYPE html>") == 1

    def test_post_is_accepted(self, test_client: TestClient) -> None:
        response = test_client.post("/steps/welcome")
        assert response.status_code == 200

    def test_install_reports_progress_in_order(self, test_client: TestClient) -> None:
        body = test_client.get("/steps/install").text

        positions = [
            body.index("Creating tables"),
            body.index("Populating default data"),
            body.index("Writing settings"),
            body.index("Installation complete."),
        ]
        assert positions == sorted(positions)
        assert body.endswith("</body></html>")

    def test_license_callback_uses_short_frame(self, test_client: TestClient) -> None:
        response = test_client.get(
            "/steps/license-callback", params={"license": "GPL <2.0>"}
        )

        assert response.status_code == 200
        assert "x-frame-options" not in response.headers
        body = response.text
        assert '<body style="background-image: none">' in body
        assert '<p class="license-result">GPL &lt;2.0&gt;</p>' in body
        assert "wizard-panel" not in body
        assert body.endswith("</body></html>")

    def test_restart_redirects_without_body(self, test_client: TestClient) -> None:
        response = test_client.get("/steps/restart")

        assert response.status_code == 302
        assert response.headers["location"] == "/steps/welcome"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.content == b""

    def test_unknown_step_is_404(self, test_client: TestClient) -> None:
        response = test_client.get("/steps/nope")

        assert response.status_code == 404
        error = response.json()["detail"]["error"]
        assert error["type"] == "StepNotFoundError"
        assert error["details"] == {"step_name": "nope"}

    def test_health(self, test_client: TestClient) -> None:
        assert test_client.get("/health").json() == {"status": "ok"}


class TestFailingSteps:
    def test_error_before_commit_returns_json_500(
        self, failing_client: TestClient
    ) -> None:
        response = failing_client.get("/steps/bad-target")

        assert response.status_code == 500
        assert response.json()["detail"]["error"]["type"] == "InvalidRedirectTargetError"

    def test_unexpected_error_before_commit(self, failing_client: TestClient) -> None:
        response = failing_client.get("/steps/broken")

        assert response.status_code == 500
        assert response.json()["detail"]["error"]["type"] == "InternalError"

    def test_non_ascii_redirect_is_percent_encoded(
        self, failing_client: TestClient
    ) -> None:
        response = failing_client.get("/steps/unicode-redirect")

        assert response.status_code == 302
        assert response.headers["location"] == "/steps/%E6%97%A5%E6%9C%AC"
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_late_redirect_aborts_started_response(
        self, test_config: AppConfig
    ) -> None:
        registry = WizardStepRegistry()
        registry.register_step(LateRedirectStep())
        app = build_app(test_config, registry)
        send = RecordingSend()

        with pytest.raises(Exception) as exc_info:
            await app(_http_scope("/steps/late-redirect"), _receive, send)

        causes = []
        error: BaseException | None = exc_info.value
        while error is not None:
            causes.append(type(error))
            error = error.__cause__ or error.__context__
        assert LateRedirectError in causes

        # Headers and the first fragment already went out; the body is never
        # completed and no redirect is sent.
        assert send.start["status"] == 200
        assert send.header("location") is None
        assert b"<p>A</p>" in send.body
        assert b"</body></html>" not in send.body
        assert all(
            m.get("more_body") is True
            for m in send.messages
            if m["type"] == "http.response.body"
        )
