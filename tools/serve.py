#!/usr/bin/env python3
"""
Static file server for dist/ (page under test).

  python tools/serve.py [dir] [port]

Port 0 picks a free port. The request log is silent unless SERVE_VERBOSE=1.
"""
from __future__ import annotations
import os, sys, threading
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Tuple

DIST = Path(__file__).resolve().parents[1] / "dist"


class _Handler(SimpleHTTPRequestHandler):
    def end_headers(self):
        # each scenario must see the freshly built page
        self.send_header("Cache-Control", "no-store")
        super().end_headers()

    def log_message(self, format, *args):
        if os.getenv("SERVE_VERBOSE"):
            print(f"[serve] {self.address_string()} {format % args}", file=sys.stderr, flush=True)


def make_server(root: "Path|str" = DIST, host: str = "127.0.0.1", port: int = 0) -> ThreadingHTTPServer:
    root = Path(root)
    if not (root / "index.html").exists():
        raise SystemExit(f"[serve] {root}/index.html not found — run tools/build.py first")
    handler = partial(_Handler, directory=str(root))
    return ThreadingHTTPServer((host, port), handler)


def start(root: "Path|str" = DIST, host: str = "127.0.0.1", port: int = 0) -> Tuple[ThreadingHTTPServer, str]:
    """Serve `root` on a daemon thread; returns (server, base_url)."""
    server = make_server(root, host, port)
    t = threading.Thread(target=server.serve_forever, name="static-server", daemon=True)
    t.start()
    h, p = server.server_address[:2]
    url = f"http://{h}:{p}"
    print(f"[serve] {root} -> {url}", flush=True)
    return server, url


def stop(server: ThreadingHTTPServer):
    server.shutdown()
    server.server_close()


def main() -> int:
    root = Path(sys.argv[1]) if len(sys.argv) > 1 else DIST
    port = int(sys.argv[2]) if len(sys.argv) > 2 else 8000
    server = make_server(root, "127.0.0.1", port)
    print(f"[serve] {root} -> http://127.0.0.1:{server.server_address[1]} (Ctrl+C to stop)", flush=True)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
