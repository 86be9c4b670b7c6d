"""Tests for request execution and response rendering."""

from unittest.mock import MagicMock, patch

import pytest

from httpfile.engine import (
    ExecutionResult,
    beautify_json,
    execute_requests,
    media_type,
    render_response,
    select_requests,
    send_request,
)
from httpfile.errors import EmptyRequestError, RequestIndexError
from httpfile.request import Request


def _mock_response(
    status_code: int = 200,
    text: str = "",
    headers: dict | None = None,
    reason: str = "OK",
) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.reason = reason
    resp.text = text
    resp.headers = headers if headers is not None else {}
    return resp


class TestSendRequest:
    """Tests for the send_request function."""

    @patch("httpfile.engine.requests.request")
    def test_passes_request_fields(self, mock_request):
        mock_request.return_value = _mock_response(201, "created")
        req = Request(
            method="POST",
            url="https://example.com/items",
            headers={"Content-Type": "application/json"},
            url_parameters=[("tag", "a"), ("tag", "b")],
            body='{"name": "x"}',
        )

        result = send_request(req, timeout=5)

        kwargs = mock_request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "https://example.com/items"
        assert kwargs["params"] == [("tag", "a"), ("tag", "b")]
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert kwargs["data"] == b'{"name": "x"}'
        assert kwargs["timeout"] == 5
        assert kwargs["verify"] is True
        assert result.response.status_code == 201
        assert result.elapsed >= 0

    @patch("httpfile.engine.requests.request")
    def test_empty_body_and_parameters_are_omitted(self, mock_request):
        mock_request.return_value = _mock_response()
        send_request(Request("GET", "https://example.com"), verify=False)

        kwargs = mock_request.call_args.kwargs
        assert kwargs["params"] is None
        assert kwargs["data"] is None
        assert kwargs["verify"] is False


class TestSelectRequests:
    """Tests for choosing which requests to run."""

    def setup_method(self):
        self.reqs = [Request("GET", "https://a"), Request("POST", "https://b")]

    def test_none_selects_all(self):
        assert select_requests(self.reqs, None) == self.reqs

    def test_single_index(self):
        assert select_requests(self.reqs, 1) == [self.reqs[1]]

    def test_out_of_range_raises(self):
        with pytest.raises(RequestIndexError, match="2 out of 2"):
            select_requests(self.reqs, 2)

    def test_all_skips_blocks_without_request_line(self):
        reqs = [Request()] + self.reqs
        assert select_requests(reqs, None) == self.reqs

    def test_index_of_empty_block_raises(self):
        reqs = [Request()] + self.reqs
        with pytest.raises(EmptyRequestError, match="request #0 is empty"):
            select_requests(reqs, 0)


class TestRenderResponse:
    """Tests for response rendering."""

    def test_verbosity_zero_is_raw_body(self):
        result = ExecutionResult(_mock_response(text='{"a":1}'), 0.1)
        assert render_response(result, 0) == '{"a":1}'

    def test_verbose_shows_status_headers_and_body(self):
        resp = _mock_response(
            404, "missing", {"Content-Type": "text/plain"}, "Not Found"
        )
        output = render_response(ExecutionResult(resp, 0.25), 1)
        assert output.startswith("404 Not Found - 0.250s\n")
        assert "Content-Type: text/plain\n" in output
        assert output.endswith("\nmissing")

    def test_verbose_pretty_prints_json(self):
        resp = _mock_response(
            text='{"a":1}',
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        output = render_response(ExecutionResult(resp, 0.0), 1)
        assert output.endswith('{\n  "a": 1\n}')

    def test_invalid_json_is_left_as_is(self):
        assert beautify_json("not json") == "not json"

    def test_media_type(self):
        assert media_type("Application/JSON; charset=utf-8") == "application/json"
        assert media_type("") == ""


class TestExecuteRequests:
    """Tests for the execute_requests loop."""

    @patch("httpfile.engine.requests.request")
    def test_runs_all_requests_in_order(self, mock_request, capsys):
        mock_request.side_effect = [
            _mock_response(text="first"),
            _mock_response(text="second"),
        ]
        reqs = [Request("GET", "https://a"), Request("GET", "https://b")]

        execute_requests(reqs, index=None)

        urls = [c.kwargs["url"] for c in mock_request.call_args_list]
        assert urls == ["https://a", "https://b"]
        assert capsys.readouterr().out == "first\nsecond\n"

    @patch("httpfile.engine.requests.request")
    def test_very_verbose_echoes_request(self, mock_request, capsys):
        mock_request.return_value = _mock_response(text="ok")
        execute_requests([Request("DELETE", "https://a/1")], verbosity=2)

        out = capsys.readouterr().out
        assert out.startswith("===== Request:\nDELETE https://a/1 HTTP/1.1\n")
        assert "===== Response:\n200 OK" in out

    @patch("httpfile.engine.requests.request")
    def test_bad_index_sends_nothing(self, mock_request):
        with pytest.raises(RequestIndexError):
            execute_requests([Request("GET", "https://a")], index=3)
        mock_request.assert_not_called()
