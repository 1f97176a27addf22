"""Unit tests for logging setup."""

import io
import json
import logging

import pytest

from enhancer.logging import setup_logging
from enhancer.search import MockSearchProvider, SearchProviderChain
from fakes import FailingSearchProvider


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    yield stream
    logging.basicConfig(handlers=[logging.NullHandler()], level=logging.WARNING, force=True)


@pytest.mark.asyncio
async def test_text_output_names_failed_provider_and_cause(log_stream):
    setup_logging("WARNING", stream=log_stream)
    chain = SearchProviderChain(
        [FailingSearchProvider("serpapi", "invalid API key"), MockSearchProvider()]
    )

    await chain.search("chatbots")

    output = log_stream.getvalue()
    assert "[WARNING] enhancer.search.chain: Search provider serpapi failed" in output
    assert "invalid API key" in output


def test_text_output_appends_extra_fields(log_stream):
    setup_logging("INFO", stream=log_stream)

    logging.getLogger("enhancer.test").info("Article created", extra={"article_id": 4})

    assert log_stream.getvalue().rstrip().endswith("Article created | article_id=4")


def test_json_output_carries_extra_fields(log_stream):
    setup_logging("INFO", stream=log_stream, log_format="json")

    logging.getLogger("enhancer.test").warning("Stage failed", extra={"stage": "search"})

    record = json.loads(log_stream.getvalue().strip().splitlines()[-1])
    assert record["message"] == "Stage failed"
    assert record["level"] == "WARNING"
    assert record["stage"] == "search"


def test_third_party_loggers_are_quieted(log_stream):
    setup_logging("DEBUG", stream=log_stream)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("enhancer").getEffectiveLevel() == logging.DEBUG
