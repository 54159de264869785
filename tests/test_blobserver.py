import http.client
import threading

import pytest

from lws.blobserver import expand_base_dir, make_server


@pytest.fixture
def server(tmp_path):
    base = tmp_path / "blobs"
    base.mkdir()
    srv = make_server("127.0.0.1:0", str(base))
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    yield srv
    srv.shutdown()
    srv.server_close()


def _request(srv, method, path):
    host, port = srv.server_address[:2]
    conn = http.client.HTTPConnection(host, port, timeout=5)
    try:
        conn.request(method, path)
        resp = conn.getresponse()
        body = resp.read()
        return resp.status, resp.getheader("Location"), body
    finally:
        conn.close()


def test_serves_existing_blob(server):
    with open(f"{server.base_dir}/abc123", "wb") as handle:
        handle.write(b"hello blob")
    status, _, body = _request(server, "GET", "/abc123")
    assert status == 200
    assert body == b"hello blob"


def test_missing_blob_is_not_found(server):
    status, _, body = _request(server, "GET", "/missing")
    assert status == 404
    assert body == b"not found\n"


def test_known_missing_blob_redirects(server):
    server.redirects["deadbeef"] = "https://blobs.example.com/model.gguf"
    status, location, _ = _request(server, "GET", "/deadbeef")
    assert status == 302
    assert location == "https://blobs.example.com/model.gguf"


def test_other_methods_not_allowed(server):
    status, _, body = _request(server, "POST", "/abc123")
    assert status == 405
    assert body == b"method not allowed\n"


def test_nested_path_is_not_found(server):
    status, _, body = _request(server, "GET", "/a/b")
    assert status == 404
    assert body == b"not found\n"
    status, _, _ = _request(server, "DELETE", "/a/b")
    assert status == 404


def test_dot_dot_is_rejected(server):
    status, _, _ = _request(server, "GET", "/..")
    assert status == 400


def test_root_lists_directory(server):
    with open(f"{server.base_dir}/blobname", "wb") as handle:
        handle.write(b"x")
    status, _, body = _request(server, "GET", "/")
    assert status == 200
    assert b"blobname" in body


def test_expand_base_dir_uses_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert expand_base_dir("~/.cache/blobserver/blobs") == str(tmp_path / ".cache" / "blobserver" / "blobs")


def test_expand_base_dir_leaves_other_paths():
    assert expand_base_dir("/srv/blobs") == "/srv/blobs"
    assert expand_base_dir("~user/blobs") == "~user/blobs"


def test_make_server_rejects_bad_address():
    with pytest.raises(ValueError):
        make_server("no-port", "/tmp")