import httpx
import pytest

from catalog.core.api_client import CatalogAPIClient
from catalog.core.errors import RemoteError
from tests.factories import API_BASE_URL, make_product, request_json


@pytest.mark.asyncio
async def test_list_products_sends_filters_and_token(api_client, fake_api):
    fake_api.on("GET", "/products", json_body={"products": [make_product()]})

    data = await api_client.list_products(token="abc", status="active", category="mobile")

    assert data["products"][0]["productName"] == "Phone X"
    request = fake_api.calls("GET", "/products")[0]
    assert request.headers["Authorization"] == "Bearer abc"
    assert request.url.params["status"] == "active"
    assert request.url.params["category"] == "mobile"


@pytest.mark.asyncio
async def test_list_products_without_filters(api_client, fake_api):
    fake_api.on("GET", "/products", json_body={"products": []})

    await api_client.list_products()

    request = fake_api.calls("GET", "/products")[0]
    assert "status" not in request.url.params
    assert "Authorization" not in request.headers


@pytest.mark.asyncio
async def test_login_posts_credentials(api_client, fake_api):
    fake_api.on("POST", "/auth/login", json_body={"user": {"_id": "u1"}, "token": "t"})

    await api_client.login("jane@example.com", "Secret123")

    assert request_json(fake_api.calls("POST", "/auth/login")[0]) == {
        "email": "jane@example.com",
        "password": "Secret123",
    }


@pytest.mark.asyncio
async def test_error_list_becomes_remote_error(api_client, fake_api):
    fake_api.on("POST", "/auth/register", status_code=400, json_body={"errors": [{"msg": "Email taken"}]})

    with pytest.raises(RemoteError) as exc:
        await api_client.register("jane", "jane@example.com", "Secret123")

    assert exc.value.message == "Email taken"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_non_json_error_uses_fallback(api_client, fake_api):
    fake_api.on("POST", "/products", status_code=500, content=b"Internal Server Error")

    with pytest.raises(RemoteError, match="Failed to save product"):
        await api_client.create_product({"productName": "X"})


@pytest.mark.asyncio
async def test_malformed_success_body_uses_fallback(api_client, fake_api):
    fake_api.on("GET", "/products/slug/phone-x", content=b"not json")

    with pytest.raises(RemoteError, match="Failed to load product details"):
        await api_client.get_product_by_slug("phone-x")


@pytest.mark.asyncio
async def test_network_failure_becomes_remote_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = CatalogAPIClient(base_url=API_BASE_URL, transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(RemoteError) as exc:
            await client.delete_product("p1")
    finally:
        await client.close()

    assert exc.value.message == "Failed to delete product"
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_delete_image_sends_public_id(api_client, fake_api):
    fake_api.on("DELETE", "/upload", json_body={"message": "deleted"})

    await api_client.delete_image("catalog/abc123", token="t")

    assert request_json(fake_api.calls("DELETE", "/upload")[0]) == {"publicId": "catalog/abc123"}


@pytest.mark.asyncio
async def test_upload_image_sends_multipart(api_client, fake_api):
    fake_api.on("POST", "/upload", json_body={"url": "https://cdn.example.com/new.jpg"})

    data = await api_client.upload_image("new.jpg", b"\x89PNG", "image/png", token="t")

    assert data["url"] == "https://cdn.example.com/new.jpg"
    request = fake_api.calls("POST", "/upload")[0]
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    assert b'name="image"' in request.content
