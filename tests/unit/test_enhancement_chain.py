"""Unit tests for prompt building, template composition and the enhancement chain."""

import pytest

from enhancer.config import EnhancementSettings
from enhancer.enhancement import (
    EnhancementProviderChain,
    PromptBuilder,
    ProviderFactory,
    TemplateComposer,
    build_enhancement_chain,
    build_references_section,
)
from enhancer.errors import ConfigurationError, EnhancementError
from enhancer.models import Article, ReferenceDocument
from fakes import ScriptedGenerativeProvider

REFERENCES = [
    ReferenceDocument(title="Zendesk guide", url="https://zendesk.example/guide", content="z" * 1000),
    ReferenceDocument(title="Intercom post", url="https://intercom.example/post", content="i" * 1000),
]

EXPECTED_REFERENCES = (
    "---\n\n## References\n\n"
    "This article was enhanced using insights from the following sources:\n\n"
    "1. [Zendesk guide](https://zendesk.example/guide)\n"
    "2. [Intercom post](https://intercom.example/post)\n"
)


@pytest.fixture
def article() -> Article:
    return Article(id=7, title="Chatbots in support", content="o" * 2000)


def test_references_section_format():
    assert build_references_section(REFERENCES) == EXPECTED_REFERENCES


def test_prompt_contains_truncated_excerpts_and_instructions(article):
    prompt = PromptBuilder().build(article, REFERENCES)

    assert prompt.startswith("You are enhancing an article")
    assert "Title: Chatbots in support\n" in prompt
    assert "o" * 1500 + "\n" in prompt
    assert "o" * 1501 not in prompt
    assert "Reference 2:\nTitle: Intercom post\nURL: https://intercom.example/post\n" in prompt
    assert "z" * 800 + "\n" in prompt
    assert "z" * 801 not in prompt
    assert "Keep it between 500-1500 words" in prompt
    assert "Do NOT add a references section" in prompt
    assert prompt.endswith("Enhanced Article:")


def test_prompt_excerpt_lengths_configurable(article):
    prompt = PromptBuilder(original_excerpt_chars=10, reference_excerpt_chars=5).build(
        article, REFERENCES
    )

    assert "Content:\n" + "o" * 10 + "\n\n" in prompt
    assert "Content excerpt:\n" + "z" * 5 + "\n" in prompt


def test_template_composer_layout():
    article = Article(id=1, title="Title", content="a" * 500 + "b" * 1000 + "c" * 100)

    text = TemplateComposer().compose(article, REFERENCES)

    assert text.startswith("# Title\n\n## Introduction\n\n" + "a" * 500 + "\n\n## Main Content\n\n" + "b" * 1000 + "\n\n")
    assert "## Conclusion\n\n" in text
    assert "c" * 10 not in text
    assert text.endswith(EXPECTED_REFERENCES)


def test_template_composer_rejects_blank_article():
    article = Article.model_construct(id=1, title=" ", content="body")

    with pytest.raises(EnhancementError):
        TemplateComposer().compose(article, REFERENCES)


@pytest.mark.asyncio
async def test_first_non_empty_provider_wins(article):
    failing = ScriptedGenerativeProvider("gemini", fail=True)
    empty = ScriptedGenerativeProvider("openai", text="   ")
    good = ScriptedGenerativeProvider("anthropic", text="# Better article\n\nBody\n")
    never = ScriptedGenerativeProvider("huggingface", text="unused")
    chain = EnhancementProviderChain([failing, empty, good, never])

    result = await chain.enhance(article, REFERENCES)

    assert result.provider == "anthropic"
    assert result.text == "# Better article\n\nBody\n\n" + EXPECTED_REFERENCES
    assert never.prompts == []
    assert failing.prompts == empty.prompts == good.prompts


@pytest.mark.asyncio
async def test_falls_back_to_template_when_every_provider_fails(article):
    chain = EnhancementProviderChain(
        [ScriptedGenerativeProvider("gemini", fail=True), ScriptedGenerativeProvider("openai", fail=True)]
    )

    result = await chain.enhance(article, REFERENCES)

    assert result.provider == "template"
    assert result.text.startswith("# Chatbots in support")
    assert result.text.endswith(EXPECTED_REFERENCES)


@pytest.mark.asyncio
async def test_no_providers_returns_non_empty_text(article):
    result = await EnhancementProviderChain([]).enhance(article, REFERENCES)

    assert result.provider == "template"
    assert result.text.strip()


def test_factory_skips_unconfigured_providers():
    factory = ProviderFactory(EnhancementSettings())

    assert factory.create_all_configured() == []
    assert [name for name, _ in factory.errors] == ["gemini", "openai", "anthropic", "huggingface"]


def test_factory_builds_configured_providers_in_order(monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
    monkeypatch.setenv("GEMINI_API_KEY", "gm-key")
    monkeypatch.setenv("OPENAI_API_KEY", "your_openai_key_here")

    providers = ProviderFactory(EnhancementSettings()).create_all_configured()

    assert [p.name for p in providers] == ["gemini", "anthropic"]


def test_factory_unknown_provider():
    with pytest.raises(ConfigurationError):
        ProviderFactory(EnhancementSettings(ENHANCEMENT_PROVIDERS="gemini,palm")).create_all_configured()


def test_build_enhancement_chain_uses_excerpt_settings(monkeypatch):
    monkeypatch.setenv("ENHANCEMENT_ORIGINAL_EXCERPT_CHARS", "100")

    chain = build_enhancement_chain(EnhancementSettings())

    assert chain.providers == []
    assert chain.prompt_builder.original_excerpt_chars == 100
    assert chain.prompt_builder.reference_excerpt_chars == 800


@pytest.mark.asyncio
async def test_generative_failure_is_logged_with_provider_name(article, caplog):
    chain = EnhancementProviderChain(
        [
            ScriptedGenerativeProvider("gemini", fail=True),
            ScriptedGenerativeProvider("openai", text="# Better"),
        ]
    )

    with caplog.at_level("WARNING", logger="enhancer.enhancement.chain"):
        result = await chain.enhance(article, REFERENCES)

    assert result.provider == "openai"
    messages = [r.getMessage() for r in caplog.records]
    assert any("gemini" in m and "Configured to fail" in m for m in messages)
