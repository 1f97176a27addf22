"""Unit tests for ContentExtractor."""

from unittest.mock import patch

import httpx
import pytest

from enhancer.errors import ExtractionError
from enhancer.extraction import ContentExtractor, SelectorRule, build_rules, normalize_text

PARAGRAPH = (
    "Customer support teams adopt chatbots to answer routine questions instantly, "
    "freeing agents to focus on complex conversations that need a human touch."
)

ARTICLE_PAGE = f"""
<html><head><title>Chatbots</title><script>var x = 1;</script></head>
<body>
  <nav>Home | Blog | Pricing</nav>
  <article>
    <h1>Why chatbots matter</h1>
    <p>{PARAGRAPH}</p>
    <p>{PARAGRAPH}</p>
    <p>{PARAGRAPH}</p>
  </article>
  <footer>Copyright</footer>
</body></html>
"""


def _extractor(handler, **kwargs) -> ContentExtractor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    rules = build_rules(
        ["article", ".post-content", ".entry-content", ".article-content", "main", '[class*="content"]'],
        200,
    )
    return ContentExtractor(timeout=5, user_agent="TestAgent/1.0", rules=rules, client=client, **kwargs)


def test_normalize_text_collapses_whitespace():
    assert normalize_text("  a \t b c \n\n\n  d  ") == "a b c\nd"


@pytest.mark.asyncio
async def test_extract_uses_readability_and_sends_user_agent():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["user-agent"]
        return httpx.Response(200, text=ARTICLE_PAGE, headers={"content-type": "text/html"})

    text = await _extractor(handler).extract("https://example.org/post")

    assert seen["ua"] == "TestAgent/1.0"
    assert "Customer support teams adopt chatbots" in text
    assert "var x" not in text
    assert "Copyright" not in text


@pytest.mark.asyncio
async def test_non_2xx_raises_extraction_error():
    extractor = _extractor(lambda request: httpx.Response(403, text="Forbidden"))

    with pytest.raises(ExtractionError) as excinfo:
        await extractor.extract("https://example.org/blocked")
    assert excinfo.value.url == "https://example.org/blocked"
    assert excinfo.value.stage == "extract"


@pytest.mark.asyncio
async def test_timeout_raises_extraction_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ExtractionError):
        await _extractor(handler).extract("https://example.org/slow")


@pytest.mark.asyncio
async def test_empty_document_raises_extraction_error():
    with pytest.raises(ExtractionError):
        await _extractor(lambda request: httpx.Response(200, text="   ")).extract("https://example.org/empty")


def test_selector_fallback_when_readability_finds_nothing():
    extractor = _extractor(lambda request: httpx.Response(200))
    html = f"""
    <html><body>
      <header>Site header</header>
      <div class="post-content">{PARAGRAPH} {PARAGRAPH}</div>
      <aside>Related posts</aside>
    </body></html>
    """

    with patch.object(ContentExtractor, "readability_text", return_value=""):
        text = extractor.extract_from_html(html)

    assert text.startswith("Customer support teams")
    assert "Site header" not in text
    assert "Related posts" not in text


def test_selector_rules_respect_min_length_and_order():
    extractor = ContentExtractor(
        rules=[SelectorRule("article", 200), SelectorRule("main", 10)],
    )
    html = "<html><body><article>Too short</article><main>Main body text here</main></body></html>"

    assert extractor.selector_text(html) == "Main body text here"


def test_selector_fallback_uses_body_text():
    extractor = ContentExtractor(rules=[SelectorRule("article", 200)])
    html = "<html><body><div>Only a short note</div><script>ignored()</script></body></html>"

    assert extractor.selector_text(html) == "Only a short note"
