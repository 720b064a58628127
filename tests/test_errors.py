"""
tests/test_errors.py
"""
from __future__ import annotations

from quire.blog import app


def test_404_custom_page(client):
    """Any unknown URL yields the themed “Page not found” template."""
    resp = client.get("/this/route/does/not/exist")
    assert resp.status_code == 404
    assert b"Page not found" in resp.data
    assert b"doesn" in resp.data  # generic message, not a post one


def test_500_handler_renders_friendly_page(client, monkeypatch):
    """
    Temporarily replace the post index with a view that crashes, but
    disable exception propagation so the global 500-handler can render.
    """

    def _boom():
        raise RuntimeError("kaboom!")

    monkeypatch.setitem(app.view_functions, "list_posts_view", _boom)
    monkeypatch.setitem(app.config, "PROPAGATE_EXCEPTIONS", False)

    resp = client.get("/posts")
    assert resp.status_code == 500
    assert b"Internal Server Error" in resp.data
    assert b"kaboom" not in resp.data


def test_security_headers(client):
    resp = client.get("/posts")
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
