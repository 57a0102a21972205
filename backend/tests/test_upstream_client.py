"""
Tests for the prediction service client.
requests.post is patched; no network is touched.
"""
import pytest
import requests
from unittest.mock import MagicMock, patch
from pocketlens.errors import UpstreamError
from pocketlens.upstream.client import PocketServiceClient


def _reply(status=200, content=b"", headers=None, json_data=None, reason="OK"):
    res = MagicMock()
    res.status_code = status
    res.ok = status < 400
    res.reason = reason
    res.content = content
    res.headers = headers or {}
    if json_data is None:
        res.json.side_effect = ValueError("not json")
    else:
        res.json.return_value = json_data
    return res


class TestSubmit:

    def test_pdb_id_sent_as_form_field(self):
        reply = _reply(content=b"--X--", headers={"Content-Type": "multipart/form-data; boundary=X"})
        with patch("pocketlens.upstream.client.requests.post", return_value=reply) as post:
            content_type, body = PocketServiceClient(url="http://svc/process/", timeout=5).submit(pdb_id="1ABC")
        assert content_type == "multipart/form-data; boundary=X"
        assert body == b"--X--"
        args, kwargs = post.call_args
        assert args[0] == "http://svc/process/"
        assert kwargs["data"] == {"pdb_id": "1ABC"}
        assert kwargs["files"] is None
        assert kwargs["timeout"] == 5

    def test_file_sent_as_upload(self):
        reply = _reply(headers={"Content-Type": "multipart/form-data; boundary=X"})
        with patch("pocketlens.upstream.client.requests.post", return_value=reply) as post:
            PocketServiceClient(url="http://svc/").submit(pdb_file=("mine.pdb", b"END\n"))
        files = post.call_args.kwargs["files"]
        assert files["pdb_file"][0] == "mine.pdb"
        assert files["pdb_file"][1] == b"END\n"
        assert post.call_args.kwargs["data"] == {}

    def test_json_error_detail_surfaced(self):
        reply = _reply(status=422, json_data={"detail": "Invalid PDB ID"})
        with patch("pocketlens.upstream.client.requests.post", return_value=reply):
            with pytest.raises(UpstreamError) as exc_info:
                PocketServiceClient(url="http://svc/").submit(pdb_id="XXXX")
        assert str(exc_info.value) == "GRaSP API error: Invalid PDB ID (Status: 422)"
        assert exc_info.value.status_code == 422

    def test_json_error_without_known_field_is_dumped(self):
        reply = _reply(status=500, json_data={"code": 7})
        with patch("pocketlens.upstream.client.requests.post", return_value=reply):
            with pytest.raises(UpstreamError, match=r'\{"code": 7\}'):
                PocketServiceClient(url="http://svc/").submit(pdb_id="1ABC")

    def test_non_json_error_uses_reason(self):
        reply = _reply(status=503, reason="Service Unavailable")
        with patch("pocketlens.upstream.client.requests.post", return_value=reply):
            with pytest.raises(UpstreamError) as exc_info:
                PocketServiceClient(url="http://svc/").submit(pdb_id="1ABC")
        assert str(exc_info.value) == "GRaSP API request failed: Service Unavailable (Status: 503)"

    def test_connection_failure_raises_upstream_error(self):
        with patch("pocketlens.upstream.client.requests.post",
                   side_effect=requests.ConnectionError("refused")):
            with pytest.raises(UpstreamError, match="unreachable"):
                PocketServiceClient(url="http://svc/").submit(pdb_id="1ABC")
