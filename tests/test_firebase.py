import threading
import time

import firebase_admin
from firebase_admin import credentials

from mentalcare import firebase


def test_concurrent_first_calls_initialize_once(monkeypatch):
    apps = {}
    initialized = []

    def initialize_app(cred):
        time.sleep(0.05)
        if apps:
            raise ValueError("The default Firebase app already exists.")
        initialized.append(cred)
        apps["[DEFAULT]"] = "app"

    monkeypatch.setattr(firebase_admin, "_apps", apps)
    monkeypatch.setattr(firebase_admin, "initialize_app", initialize_app)
    monkeypatch.setattr(firebase_admin, "get_app", lambda: apps["[DEFAULT]"])
    monkeypatch.setattr(credentials, "ApplicationDefault", lambda: "adc")

    results, errors = [], []

    def first_request():
        try:
            results.append(firebase.init_firebase())
        except ValueError as e:
            errors.append(e)

    threads = [threading.Thread(target=first_request) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert results == ["app"] * 4
    assert initialized == ["adc"]
