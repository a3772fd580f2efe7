import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

CONTENT = b"CONTENT"
HOST = "127.0.0.1"


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):  # noqa: A002 - silence server logs
        pass

    def _write(self, status, headers, body=b""):
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _write_chunked(self, headers, chunks):
        self.send_response(200)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header("Transfer-Encoding", "chunked")
        self.end_headers()
        for chunk in chunks:
            self.wfile.write(b"%x\r\n%s\r\n" % (len(chunk), chunk))
        self.wfile.write(b"0\r\n\r\n")

    def _html(self, body, status=200):
        self._write(status, {"Content-Type": "text/html; charset=utf-8"}, body)

    def do_HEAD(self):
        self.do_GET()

    def do_POST(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length)
        self._html(body)

    def do_GET(self):
        path = self.path.split("?", 1)[0]
        if path == "/406":
            self._html(CONTENT, status=406)
        elif path == "/echo":
            headers = {name.lower(): value for name, value in self.headers.items()}
            self._html(json.dumps(headers).encode())
        elif path == "/rawHeaders":
            raw = []
            for name, value in self.headers.items():
                raw.extend([name, value])
            self._html(json.dumps(raw).encode())
        elif path == "/invalidContentType":
            self._write(200, {"Content-Type": "application/json"}, CONTENT)
        elif path == "/invalidContentHeader":
            self._write(200, {"Content-Type": "non-existent-content-type"}, CONTENT)
        elif path == "/invalidBody":
            self._write(
                500,
                {
                    "Content-Type": "application/octet-stream",
                    "Content-Encoding": "deflate",
                },
                b"\xff\xff\xff\xff" + CONTENT,
            )
        elif path == "/unknownEncoding":
            self._write(
                200,
                {"Content-Type": "text/html", "Content-Encoding": "x-unknown"},
                CONTENT,
            )
        elif path == "/empty":
            self._html(b"")
        elif path == "/emptyJson":
            self._write(200, {"Content-Type": "application/json"}, b"")
        elif path == "/chunkedEmptyJson":
            self._write_chunked({"Content-Type": "application/json"}, [])
        elif path == "/chunkedJson":
            self._write_chunked({"Content-Type": "application/json"}, [b"{}", CONTENT])
        elif path == "/redirect":
            self._write(302, {"Location": "/rawHeaders"})
        elif path == "/slow":
            time.sleep(1.0)
            self._html(CONTENT)
        else:
            self._html(b"not found", status=404)


@pytest.fixture(scope="session")
def http_server():
    server = ThreadingHTTPServer((HOST, 0), _Handler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"{HOST}:{server.server_address[1]}"
    finally:
        server.shutdown()
        server.server_close()
