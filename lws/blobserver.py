"""HTTP server that hands out model blobs, addressed by hash, from a local directory."""

from __future__ import annotations

import argparse
import html
import logging
import mimetypes
import os
import re
import shutil
import sys
from email.utils import formatdate
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import quote, unquote, urlsplit

log = logging.getLogger(__name__)

DEFAULT_LISTEN = ":9999"
DEFAULT_BASE_DIR = "~/.cache/blobserver/blobs"

# Blobs that are not present locally but may be fetched from elsewhere:
# hash -> URL the client is redirected to.
BLOB_REDIRECTS: dict[str, str] = {}


def expand_base_dir(base_dir: str) -> str:
    """Expand a leading ``~/`` in base_dir to the user's home directory."""
    if not base_dir.startswith("~/"):
        return base_dir
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise RuntimeError(f"getting home directory: {exc}") from exc
    return os.path.join(str(home), base_dir[2:])


class BlobServer(ThreadingHTTPServer):
    """Threaded HTTP server that knows the blob directory and redirect table."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int], base_dir: str) -> None:
        self.base_dir = base_dir
        self.redirects: dict[str, str] = dict(BLOB_REDIRECTS)
        super().__init__(address, BlobRequestHandler)


class BlobRequestHandler(BaseHTTPRequestHandler):
    """Serves ``GET /<hash>`` from the server's blob directory."""

    server: BlobServer

    def _tokens(self) -> list[str]:
        path = unquote(urlsplit(self.path).path)
        if path.startswith("/"):
            path = path[1:]
        return path.split("/")

    def do_GET(self) -> None:
        tokens = self._tokens()
        if len(tokens) != 1:
            self._error(HTTPStatus.NOT_FOUND, "not found")
            return
        self._serve_blob(tokens[0])

    def _method_not_allowed(self) -> None:
        if len(self._tokens()) == 1:
            self._error(HTTPStatus.METHOD_NOT_ALLOWED, "method not allowed")
        else:
            self._error(HTTPStatus.NOT_FOUND, "not found")

    do_HEAD = do_POST = do_PUT = do_DELETE = do_PATCH = do_OPTIONS = _method_not_allowed

    def _error(self, status: HTTPStatus, message: str) -> None:
        body = (message + "\n").encode()
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("X-Content-Type-Options", "nosniff")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _serve_blob(self, blob_hash: str) -> None:
        path = os.path.join(self.server.base_dir, blob_hash)
        try:
            st = os.stat(path)
        except FileNotFoundError:
            target = self.server.redirects.get(blob_hash)
            if target is not None:
                log.info("redirecting blob %r to %r", blob_hash, target)
                self.send_response(HTTPStatus.FOUND)
                self.send_header("Location", target)
                self.send_header("Content-Length", "0")
                self.end_headers()
            else:
                log.info("blob %r not found", path)
                self._error(HTTPStatus.NOT_FOUND, "not found")
            return
        except OSError as exc:
            log.warning("unable to get stat(%r): %s", path, exc)
            self._error(HTTPStatus.INTERNAL_SERVER_ERROR, "internal server error")
            return

        if ".." in re.split(r"[/\\]", blob_hash):
            self._error(HTTPStatus.BAD_REQUEST, "invalid URL path")
            return

        log.info("serving blob %r", path)
        if os.path.isdir(path):
            self._serve_listing(path)
        else:
            self._serve_file(path, st)

    def _serve_listing(self, path: str) -> None:
        lines = ['<!doctype html>\n<meta name="viewport" content="width=device-width">\n<pre>\n']
        for entry in sorted(os.scandir(path), key=lambda e: e.name):
            name = entry.name + ("/" if entry.is_dir() else "")
            lines.append(f'<a href="{html.escape(quote(name))}">{html.escape(name)}</a>\n')
        lines.append("</pre>\n")
        body = "".join(lines).encode()
        self.send_response(HTTPStatus.OK)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _serve_file(self, path: str, st: os.stat_result) -> None:
        try:
            handle = open(path, "rb")
        except OSError as exc:
            log.warning("unable to open %r: %s", path, exc)
            self._error(HTTPStatus.INTERNAL_SERVER_ERROR, "internal server error")
            return
        with handle:
            content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(st.st_size))
            self.send_header("Last-Modified", formatdate(st.st_mtime, usegmt=True))
            self.send_header("Accept-Ranges", "bytes")
            self.end_headers()
            shutil.copyfileobj(handle, self.wfile)

    def log_message(self, format: str, *args: object) -> None:
        log.debug("%s - %s", self.address_string(), format % args)


def make_server(listen: str, base_dir: str) -> BlobServer:
    """Create (but do not start) a blob server bound to a ``host:port`` address."""
    host, sep, port = listen.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {listen!r}")
    host = host.strip("[]")
    return BlobServer((host, int(port)), base_dir)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="blobserver", description="Serve blobs by hash.")
    parser.add_argument(
        "--redirect",
        action="append",
        default=[],
        metavar="HASH=URL",
        help="redirect requests for a blob missing locally to URL",
    )
    opts = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    listen = DEFAULT_LISTEN
    try:
        base_dir = expand_base_dir(DEFAULT_BASE_DIR)
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        return 1

    try:
        server = make_server(listen, base_dir)
    except OSError as exc:
        print(f"serving on {listen!r}: {exc}", file=sys.stderr)
        return 1

    for item in opts.redirect:
        blob_hash, sep, target = item.partition("=")
        if not sep:
            server.server_close()
            parser.error(f"invalid --redirect {item!r}, expected HASH=URL")
        server.redirects[blob_hash] = target

    log.info("serving on %r", listen)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0