
import json
import os

import pytest

ASSETS_DIR = os.path.join(os.path.dirname(__file__), "..", "assets")

@pytest.fixture()
def setup_env(monkeypatch):
    def _set_envs(env_vars: dict):
        """ Set the env vars for the lambda """
        for k, v in env_vars.items():
            monkeypatch.setenv(k, v)
    return _set_envs

@pytest.fixture()
def load_asset():
    def _load_asset(name: str) -> dict:
        """ Canned event/API payloads live in tests/assets """
        with open(os.path.join(ASSETS_DIR, name), encoding="utf-8") as f:
            return json.load(f)
    return _load_asset

@pytest.fixture()
def log_records():
    """
    A log sink that just keeps everything, so tests can check what
    got logged. Pass 'log_records.append' as the lambda's log function.
    """
    return []
