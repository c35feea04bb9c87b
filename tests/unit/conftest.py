import json
import logging

import pytest
import requests

from indigo_ai.core.config import Settings


def make_response(status_code=200, body=None, reason="OK"):
    """A requests.Response with a preloaded body (dict/list -> JSON)."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        response._content = b""
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode("utf-8")
    response._content_consumed = True
    return response


@pytest.fixture
def test_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("INDIGO_AUTH", raising=False)
    return Settings(
        _env_file=None,
        INDIGO_AUTH="operator:s3cret",
        INDIGO_IP="127.0.0.1",
        INDIGO_PORT="8176",
        PROMPT_DIR=str(tmp_path),
    )


@pytest.fixture
def prompt_files(tmp_path):
    (tmp_path / "prompt3.txt").write_text(
        "DEVICES: {{&input}}\nQUESTION: {{&user_prompt}}\n", encoding="utf-8"
    )
    (tmp_path / "prompt2.txt").write_text(
        "STATES: {{&input}}\nQUESTION: {{&user_prompt}}\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def response():
    return make_response


@pytest.fixture(autouse=True)
def restore_root_logger():
    # main() reconfigures the root logger with force=True
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
