"""Unit tests for recipe_extract.ingest module."""

import httpx
import pytest

from recipe_extract.exceptions import IngestError
from recipe_extract.ingest import fetch_page_text, html_to_text

RECIPE_PAGE = """
<html>
  <head><title>Lemon Cake</title><style>body { color: red; }</style></head>
  <body>
    <header><nav><a href="/">Home</a></nav></header>
    <main>
      <p>My grandmother's favourite.</p>
      <div class="recipe-card">
        <h2>Lemon Cake</h2>
        <h3>Ingredients</h3>
        <ul>
          <li>200 g <b>flour</b></li>
          <li>2 lemons</li>
        </ul>
        <h3>Method</h3>
        <ol><li>Mix everything.</li><li>Bake for 40 minutes.</li></ol>
      </div>
    </main>
    <aside>Subscribe to the newsletter</aside>
    <footer>Copyright</footer>
    <script>track();</script>
  </body>
</html>
"""


def client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHtmlToText:
    """Tests for html_to_text."""

    def test_recipe_container_preferred(self) -> None:
        """The recipe card wins over the surrounding page."""
        assert html_to_text(RECIPE_PAGE) == (
            "Lemon Cake\nIngredients\n200 g flour\n2 lemons\nMethod\n"
            "Mix everything.\nBake for 40 minutes."
        )

    def test_non_content_removed(self) -> None:
        """Navigation, scripts and asides never reach the text."""
        text = html_to_text(
            "<body><nav>Menu</nav><p>Stir well.</p><script>x()</script><aside>Ad</aside></body>"
        )
        assert text == "Stir well."

    def test_line_breaks(self) -> None:
        """<br> separates lines."""
        assert html_to_text("<article><p>2 eggs<br>1 cup milk</p></article>") == (
            "2 eggs\n1 cup milk"
        )

    def test_whitespace_collapsed(self) -> None:
        """Runs of spaces and non-breaking spaces collapse to one space."""
        assert html_to_text("<p>1\xa0tsp   salt</p>") == "1 tsp salt"

    def test_empty_page(self) -> None:
        """A page without text yields an empty string."""
        assert html_to_text("<html><body><script>x()</script></body></html>") == ""


class TestFetchPageText:
    """Tests for fetch_page_text."""

    @pytest.mark.asyncio
    async def test_fetch(self) -> None:
        """The page is fetched and reduced to text."""

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "https://example.com/cake"
            return httpx.Response(200, text=RECIPE_PAGE)

        async with client_for(handler) as client:
            text = await fetch_page_text("https://example.com/cake", client)

        assert text.startswith("Lemon Cake\nIngredients")

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        """An error status raises IngestError with the URL."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, text="missing")

        async with client_for(handler) as client:
            with pytest.raises(IngestError) as exc_info:
                await fetch_page_text("https://example.com/gone", client)

        assert exc_info.value.context["url"] == "https://example.com/gone"

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        """A transport failure raises IngestError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with client_for(handler) as client:
            with pytest.raises(IngestError, match="Could not fetch page"):
                await fetch_page_text("https://example.com/", client)

    @pytest.mark.asyncio
    async def test_page_without_text(self) -> None:
        """A page with nothing to read raises IngestError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html><body></body></html>")

        async with client_for(handler) as client:
            with pytest.raises(IngestError, match="no text"):
                await fetch_page_text("https://example.com/", client)
