"""
Unit tests for the Parse Server schema client.

Tests the REST mapping of schema operations including:
- Fetching and validating the remote schema
- Create/update/delete request bodies
- Error classification (unauthorized, rejected, unreachable)
- Health checks
"""

import asyncio

import aiohttp
import aioresponses
import pytest

from parse_schema.client import ParseSchemaClient, SchemaClient
from parse_schema.exceptions import (
    RemoteError,
    RemoteRejectedError,
    RemoteUnauthorizedError,
    RemoteUnreachableError,
)


SCHEMAS_URL = "http://localhost:1337/parse/schemas"


class TestSchemaClientBase:
    """Test the abstract schema client."""

    def test_abstract_client_cannot_be_instantiated(self, parse_config):
        """Test that the abstract base class cannot be instantiated directly."""
        with pytest.raises(TypeError):
            SchemaClient(parse_config)

    def test_repr(self, parse_config):
        """Test the client names its server."""
        client = ParseSchemaClient(parse_config)

        assert repr(client) == "ParseSchemaClient(url=http://localhost:1337/parse)"


class TestFetchSchemas:
    """Test reading the remote schema."""

    @pytest.mark.asyncio
    async def test_fetch_schemas(self, parse_config, post_document):
        """Test the results list is parsed into class schemas."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.get(SCHEMAS_URL, payload={"results": [post_document]})

                schemas = await client.fetch_schemas()

        assert [s.class_name for s in schemas] == ["Post"]
        assert schemas[0].to_document() == post_document

    @pytest.mark.asyncio
    async def test_session_headers(self, parse_config):
        """Test the master key headers are sent with every request."""
        async with ParseSchemaClient(parse_config) as client:
            session = await client._get_session()

            assert session.headers["X-Parse-Application-Id"] == "test-app"
            assert session.headers["X-Parse-Master-Key"] == "test-master-key"

    @pytest.mark.asyncio
    async def test_unexpected_body(self, parse_config):
        """Test a response without a results list is refused."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.get(SCHEMAS_URL, payload={"schemas": []})

                with pytest.raises(RemoteError, match="Unexpected response"):
                    await client.fetch_schemas()

    @pytest.mark.asyncio
    async def test_unauthorized(self, parse_config):
        """Test a wrong master key is reported as unauthorized."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.get(SCHEMAS_URL, status=403, payload={"error": "unauthorized"})

                with pytest.raises(RemoteUnauthorizedError, match="Authentication failed: unauthorized") as exc_info:
                    await client.fetch_schemas()

        assert exc_info.value.status_code == 403
        assert isinstance(exc_info.value, RemoteUnreachableError)

    @pytest.mark.asyncio
    async def test_network_error(self, parse_config):
        """Test connection failures are reported as unreachable."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.get(SCHEMAS_URL, exception=aiohttp.ClientError("Connection refused"))

                with pytest.raises(RemoteUnreachableError, match="Network error during GET"):
                    await client.fetch_schemas()

    @pytest.mark.asyncio
    async def test_timeout(self, parse_config):
        """Test timeouts are reported as unreachable."""
        async with ParseSchemaClient(parse_config, timeout=1) as client:
            with aioresponses.aioresponses() as m:
                m.get(SCHEMAS_URL, exception=asyncio.TimeoutError())

                with pytest.raises(RemoteUnreachableError, match="Timeout during GET"):
                    await client.fetch_schemas()


class TestMutations:
    """Test create/update/delete requests."""

    @pytest.mark.asyncio
    async def test_create_class(self, parse_config, post_document):
        """Test a create posts the full document to the class URL."""
        captured = {}

        def record(url, **kwargs):
            captured["json"] = kwargs.get("json")
            return aioresponses.CallbackResult(payload=post_document)

        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.post(f"{SCHEMAS_URL}/Post", callback=record)

                await client.create_class(post_document)

        assert captured["json"] == post_document

    @pytest.mark.asyncio
    async def test_update_class(self, parse_config):
        """Test an update puts the fields and permissions."""
        captured = {}

        def record(url, **kwargs):
            captured["json"] = kwargs.get("json")
            return aioresponses.CallbackResult(payload={"className": "Post"})

        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.put(f"{SCHEMAS_URL}/Post", callback=record)

                await client.update_class(
                    "Post", {"title": {"__op": "Delete"}}, {"find": {"*": True}}
                )

        assert captured["json"] == {
            "className": "Post",
            "fields": {"title": {"__op": "Delete"}},
            "classLevelPermissions": {"find": {"*": True}},
        }

    @pytest.mark.asyncio
    async def test_update_without_permissions(self, parse_config):
        """Test absent permissions are left out of the body."""
        captured = {}

        def record(url, **kwargs):
            captured["json"] = kwargs.get("json")
            return aioresponses.CallbackResult(payload={})

        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.put(f"{SCHEMAS_URL}/Post", callback=record)

                await client.update_class("Post", {"body": {"type": "String"}})

        assert "classLevelPermissions" not in captured["json"]

    @pytest.mark.asyncio
    async def test_delete_class(self, parse_config):
        """Test a delete with an empty response body."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.delete(f"{SCHEMAS_URL}/Draft", body="")

                await client.delete_class("Draft")

    @pytest.mark.asyncio
    async def test_rejected_request(self, parse_config):
        """Test a refused request carries the server's error payload."""
        error = {"code": 255, "error": "Field title exists, cannot update."}

        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.put(f"{SCHEMAS_URL}/Post", status=400, payload=error)

                with pytest.raises(RemoteRejectedError, match="cannot update") as exc_info:
                    await client.update_class("Post", {"title": {"type": "String"}})

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == 255
        assert exc_info.value.payload == error
        assert exc_info.value.class_name == "Post"

    @pytest.mark.asyncio
    async def test_rejected_without_json(self, parse_config):
        """Test a refused request with a plain text body."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.delete(f"{SCHEMAS_URL}/Post", status=500, body="")

                with pytest.raises(RemoteRejectedError, match="HTTP 500"):
                    await client.delete_class("Post")


class TestHealthCheck:
    """Test server health checks."""

    @pytest.mark.asyncio
    async def test_healthy(self, parse_config):
        """Test a server reporting ok is healthy."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.get("http://localhost:1337/parse/health", payload={"status": "ok"})

                health = await client.health_check()

        assert health["status"] == "healthy"
        assert health["api_accessible"] is True
        assert health["url"] == "http://localhost:1337/parse"
        assert "response_time_ms" in health

    @pytest.mark.asyncio
    async def test_unreachable(self, parse_config):
        """Test a network failure is reported, not raised."""
        async with ParseSchemaClient(parse_config) as client:
            with aioresponses.aioresponses() as m:
                m.get(
                    "http://localhost:1337/parse/health",
                    exception=aiohttp.ClientError("Connection refused"),
                )

                health = await client.health_check()

        assert health["status"] == "unhealthy"
        assert health["api_accessible"] is False
        assert "Network error" in health["error"]

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, parse_config):
        """Test closing twice is harmless."""
        client = ParseSchemaClient(parse_config)
        await client._get_session()

        await client.close()
        await client.close()

        assert client._session is None
