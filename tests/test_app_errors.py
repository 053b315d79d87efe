from __future__ import annotations

import logging
import threading

from flask import g

from actionkit import results


def test_traversal_becomes_generic_500(client):
    r = client.get("/files/..%2F..%2Fsecret.txt")
    assert r.status_code == 500
    err = r.get_json()["error"]
    assert err["code"] == "path_traversal"
    assert "details" not in err
    assert r.headers["X-Request-ID"] == err["request_id"]


def test_missing_file_becomes_500(client):
    r = client.get("/files/nope.pdf")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "file_not_found"


def test_missing_sample_for_bytes_download(client, web_root):
    (web_root / "sample.pdf").unlink()
    r = client.get("/file-download3")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "file_not_found"


def test_external_local_redirect_is_rejected(client):
    r = client.get("/store/continue?next=https://evil.example/")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "invalid_redirect"


def test_request_id_is_echoed(client):
    r = client.get("/files/nope.pdf", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert r.get_json()["error"]["request_id"] == "abc123"


def test_debug_includes_details(app, client):
    app.config["DEBUG"] = True
    r = client.get("/files/nope.pdf")
    assert "path" in r.get_json()["error"]["details"]


def test_unknown_route_redirect_becomes_500(app, client, caplog):
    @app.get("/broken-redirect")
    def broken_redirect():
        return results.redirect_to_route("NoSuchRoute")

    with caplog.at_level(logging.ERROR, logger="actionkit"):
        r = client.get("/broken-redirect")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "route_not_found"
    assert "RouteNotFoundError" in caplog.text


def test_serialization_error_surfaces(app, client):
    @app.get("/bad-json")
    def bad_json():
        return results.json({"x": object()})

    r = client.get("/bad-json")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "serialization_failed"


def test_cancelled_request_reads_nothing(app, client):
    @app.before_request
    def _cancel():
        ev = threading.Event()
        ev.set()
        g.cancel_event = ev

    r = client.get("/file-download")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "cancelled"


def test_plain_flask_return_values_still_work(app, client):
    @app.get("/plain")
    def plain():
        return "plain text"

    r = client.get("/plain")
    assert r.status_code == 200
    assert r.get_data(as_text=True) == "plain text"


def test_resolution_failures_get_json_envelope_outside_testing(web_root, caplog):
    from actionkit.app import create_app

    app = create_app(
        {
            "WEB_ROOT": web_root,
            "SECRET_KEY": "test",
            "DEBUG": False,
            "PROPAGATE_EXCEPTIONS": False,
        }
    )
    client = app.test_client()

    with caplog.at_level(logging.ERROR, logger="actionkit"):
        r = client.get("/files/nope.pdf")
    assert r.status_code == 500
    assert r.headers["Content-Type"] == "application/json"
    err = r.get_json()["error"]
    assert err["code"] == "file_not_found"
    assert r.headers["X-Request-ID"] == err["request_id"]
    assert "MissingFileError" in caplog.text


def test_before_request_results_are_resolved(app, client):
    @app.before_request
    def _gate():
        return results.redirect_to_route("NoSuchRoute")

    r = client.get("/about")
    assert r.status_code == 500
    assert r.get_json()["error"]["code"] == "route_not_found"


def test_tuple_returns_resolve_result_first(app, client):
    @app.get("/created")
    def created():
        return results.text("created"), 201

    @app.get("/tagged")
    def tagged():
        return results.redirect("/x"), {"X-Extra": "1"}

    @app.get("/tuple-missing")
    def tuple_missing():
        root = app.config["WEB_ROOT"]
        return results.file_path("nope.pdf", "application/pdf", root=root), 200

    r = client.get("/created")
    assert r.status_code == 201
    assert r.get_data(as_text=True) == "created"

    r2 = client.get("/tagged")
    assert r2.status_code == 302
    assert r2.headers["Location"] == "/x"
    assert r2.headers["X-Extra"] == "1"

    r3 = client.get("/tuple-missing")
    assert r3.status_code == 500
    assert r3.get_json()["error"]["code"] == "file_not_found"
