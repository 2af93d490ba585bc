"""Hypothesis-based tests for response buffer output ordering."""

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from tests.doubles import RecordingSink
from wizard_output.core.common.exceptions import LateRedirectError
from wizard_output.core.domain.envelope_mode import EnvelopeMode
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

CONTEXT = FrameContext(
    attrs=HeadAttributes(),
    title="Property wizard",
    script_urls=("config.js",),
    sidebar_text="<b>Links</b>",
    doc_links=(DocLink(label="Read me", url="?page=Readme"),),
)

REDIRECT_TARGET = "/steps/next"

operations = st.lists(
    st.tuples(
        st.sampled_from(["append", "append_no_flush"]),
        st.text(max_size=20),
    ),
    max_size=12,
)


def _request_redirect(output: ResponseBuffer) -> bool:
    try:
        output.request_redirect(REDIRECT_TARGET)
    except LateRedirectError:
        return False
    return True


class TestResponseBufferOrderingHypothesis:
    @given(
        ops=operations,
        redirect_at=st.none() | st.integers(min_value=0, max_value=12),
    )
    @settings(
        suppress_health_check=[HealthCheck.too_slow],
        max_examples=50,
        deadline=None,
    )
    @pytest.mark.asyncio
    async def test_body_is_frame_around_fragments_in_call_order(
        self, ops, redirect_at
    ) -> None:
        sink = RecordingSink()
        frame = PageFrame()
        output = create_response_buffer(sink, frame, CONTEXT)
        redirected = False

        for index, (op, fragment) in enumerate(ops):
            if index == redirect_at:
                redirected = _request_redirect(output)
            if op == "append":
                await output.append(fragment)
            else:
                output.append_no_flush(fragment)
        if redirect_at is not None and redirect_at >= len(ops):
            redirected = _request_redirect(output)
        await output.finalize()

        if redirect_at is not None:
            flushed_before = any(op == "append" for op, _ in ops[:redirect_at])
            assert redirected is not flushed_before

        if redirected:
            assert sink.body == ""
            assert sink.header_values("Location") == [REDIRECT_TARGET]
        else:
            assert sink.body == (
                frame.render_opening(EnvelopeMode.RENDER_FULL, CONTEXT)
                + "".join(fragment for _, fragment in ops)
                + frame.render_closing(EnvelopeMode.RENDER_FULL, CONTEXT)
            )
            assert sink.header_values("Location") == []
        assert output.pending == ()
