"""
API test fixtures.

Builds the FastAPI app around a ServiceContainer with injected fakes:
bag-of-words embeddings, an in-memory index, a mocked chat model and a
page fetcher served by httpx.MockTransport.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from kb_assistant.api.deps import ServiceContainer
from kb_assistant.api.main import create_app
from kb_assistant.boundary.web import PageFetcher

PAGES = {
    "/python": """
        <html><head><title>Python Guide</title></head><body><article>
        <p>Python is a popular programming language. Python code is easy to read and write.</p>
        <p>The Python programming language supports many paradigms including functional programming.</p>
        </article></body></html>
    """,
    "/empty": "<html><head><title>Empty</title></head><body></body></html>",
}


def serve_pages(request: httpx.Request) -> httpx.Response:
    """Mock transport handler serving PAGES, 404 otherwise."""
    page = PAGES.get(request.url.path)
    if page is None:
        return httpx.Response(404, text="not found")
    return httpx.Response(200, html=page)


@pytest.fixture
def services(settings, embeddings, vector_index, mock_chat_model) -> ServiceContainer:
    """Provide a container wired to test doubles."""
    return ServiceContainer(
        settings=settings,
        embeddings=embeddings,
        vector_index=vector_index,
        chat_model=mock_chat_model,
        page_fetcher=PageFetcher(transport=httpx.MockTransport(serve_pages)),
    )


@pytest.fixture
def client(services: ServiceContainer) -> TestClient:
    """Provide a test client; the lifespan is not entered."""
    return TestClient(create_app(services))
