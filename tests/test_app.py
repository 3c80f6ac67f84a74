import json

from flask import Flask

import backend.app as factory


def test_factory_module_holds_no_app_instance():
    assert not hasattr(factory, "app")


def test_wsgi_module_exposes_single_app():
    import app as wsgi

    assert isinstance(wsgi.app, Flask)
    assert wsgi.app.name == "backend.app"


def test_json_keys_keep_insertion_order(client):
    resp = client.get("/api/health")
    assert list(json.loads(resp.get_data(as_text=True))) == ["status", "service", "timestamp"]
