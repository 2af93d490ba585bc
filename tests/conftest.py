import contextlib

import pytest
from fastapi.testclient import TestClient

from tests.doubles import RecordingSink
from wizard_output.core.app.application_factory import build_app
from wizard_output.core.config.app_config import AppConfig
from wizard_output.core.domain.page_frame import (
    DocLink,
    FrameContext,
    HeadAttributes,
    PageFrame,
)
from wizard_output.core.services.response_buffer import (
    ResponseBuffer,
    create_response_buffer,
)


@pytest.fixture
def frame() -> PageFrame:
    return PageFrame()


@pytest.fixture
def frame_context() -> FrameContext:
    return FrameContext(
        attrs=HeadAttributes(lang="en", dir="ltr"),
        title="Test wizard",
        style_url="index.php?css=1",
        script_urls=("jquery.js", "config.js"),
        sidebar_text="<a href='https://example.org/'>Home</a>----<b>Help</b>",
        doc_links=(
            DocLink(label="Read me", url="?page=Readme"),
            DocLink(label="Release notes", url="?page=ReleaseNotes"),
        ),
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def output(
    sink: RecordingSink, frame: PageFrame, frame_context: FrameContext
) -> ResponseBuffer:
    return create_response_buffer(sink, frame, frame_context)


@pytest.fixture
def test_config() -> AppConfig:
    return AppConfig.model_validate(
        {"frame": {"title": "Test wizard", "sidebar_text": "<b>Links</b>"}}
    )


@pytest.fixture
def test_client(test_config: AppConfig) -> TestClient:
    """A TestClient for the app serving the built-in steps."""
    client = TestClient(build_app(test_config), follow_redirects=False)
    try:
        yield client
    finally:
        with contextlib.suppress(Exception):
            client.close()
