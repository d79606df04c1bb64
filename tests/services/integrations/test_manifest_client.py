import json

import httpx
import pytest

from app.services.integrations.manifest_service import ManifestClient


async def test_update_user_manifest_posts_owner_login_and_server():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        seen["api_key"] = request.headers.get("x-api-key")
        return httpx.Response(200, json={"ok": True})

    client = ManifestClient("http://smil.local", api_key="m-1", transport=httpx.MockTransport(handler))

    await client.update_user_manifest(owner_id=42, login="radio42", server_id=3)

    assert seen == {
        "url": "http://smil.local/manifests/42/smil",
        "body": {"login": "radio42", "server_id": 3},
        "api_key": "m-1",
    }


async def test_update_user_manifest_raises_on_error_status():
    client = ManifestClient(
        "http://smil.local",
        transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom")),
    )

    with pytest.raises(httpx.HTTPStatusError):
        await client.update_user_manifest(owner_id=42, login="radio42", server_id=3)
