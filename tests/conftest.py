"""
Pytest configuration and shared fixtures for parse-schema tests.

This module provides shared fixtures for configuration, sample class
documents and the in-memory schema server.
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from parse_schema.config import ParseServerConfig

from tests.fakes import FakeSchemaClient


SERVER_URL = "http://localhost:1337/parse"


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's PARSE_* variables and .env out of the tests."""
    for name in (
        "PARSE_SERVER_APPLICATION_ID",
        "PARSE_SERVER_MASTER_KEY",
        "PARSE_PUBLIC_SERVER_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def parse_config() -> ParseServerConfig:
    """Connection configuration pointing at a local test server."""
    return ParseServerConfig(
        publicServerURL=SERVER_URL,
        appId="test-app",
        masterKey="test-master-key",
    )


@pytest.fixture
def fake_client(parse_config) -> FakeSchemaClient:
    """Empty in-memory server."""
    return FakeSchemaClient(parse_config)


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture
def post_document() -> Dict[str, Any]:
    return {
        "className": "Post",
        "fields": {
            "title": {"type": "String", "required": True},
            "author": {"type": "Pointer", "targetClass": "_User"},
        },
        "classLevelPermissions": {"find": {"*": True}, "get": {"*": True}},
    }


@pytest.fixture
def comment_document() -> Dict[str, Any]:
    return {
        "className": "Comment",
        "fields": {
            "body": {"type": "String"},
            "post": {"type": "Pointer", "targetClass": "{{PREFIX}}Post"},
        },
        "classLevelPermissions": {},
    }


@pytest.fixture
def schema_dir(tmp_path, post_document, comment_document) -> Path:
    """Directory with one JSON document per class."""
    directory = tmp_path / "schema" / "classes"
    directory.mkdir(parents=True)
    for document in (post_document, comment_document):
        body = {k: v for k, v in document.items() if k != "className"}
        (directory / f"{document['className']}.json").write_text(json.dumps(body))
    return directory
