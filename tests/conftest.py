import httpx
import pytest

from catalog.core.api_client import CatalogAPIClient
from catalog.core.session import SessionContext
from catalog.schemas.auth import User
from catalog.schemas.product import Product
from tests.factories import API_BASE_URL, FakeCatalogAPI, make_product


@pytest.fixture
def fake_api():
    return FakeCatalogAPI()


@pytest.fixture
async def api_client(fake_api):
    client = CatalogAPIClient(base_url=API_BASE_URL, transport=httpx.MockTransport(fake_api.handler))
    yield client
    await client.close()


@pytest.fixture
def session():
    return SessionContext({})


@pytest.fixture
def signed_in(session):
    session.set(User(id="u1", username="jane", email="jane@example.com"), "token-123")
    return session


@pytest.fixture
def product_records():
    return [
        make_product(_id="p1", productName="Phone X", productUrl="phone-x", status="active", category="mobile"),
        make_product(_id="p2", productName="Phone Y", productUrl="phone-y", status="draft", category="mobile"),
        make_product(_id="p3", productName="Tablet", productUrl="tablet", status="active", category="electronics"),
        make_product(_id="p4", productName="Desk Lamp", productUrl="desk-lamp", status="inactive", category="home"),
    ]


@pytest.fixture
def products(product_records):
    return [Product.model_validate(p) for p in product_records]
