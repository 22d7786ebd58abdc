import pytest

from llm.llm_client import LLMClient, LLMResponseError, extract_json_object

def test_llm_extra_text_around_json(fake_provider_factory):
    provider = fake_provider_factory(
        'Sure! Here is the result: {"extractedTasks":[{"title":"Call mom","duration":10}]} Thanks.'
    )
    client = LLMClient(provider=provider)
    out = client.complete_json("Call mom")
    assert "extractedTasks" in out

def test_llm_markdown_fence():
    out = extract_json_object('```json\n{"confidence": "low"}\n```')
    assert out == {"confidence": "low"}

def test_llm_fence_without_language_tag():
    out = extract_json_object('```{"a": 1}```')
    assert out == {"a": 1}

@pytest.mark.parametrize(
    "text",
    ["INVALID OUTPUT", "", "   ", '{"unterminated": ', "[1, 2, 3]", "```json\n[1]\n```"],
)
def test_llm_invalid_json_raises(text):
    with pytest.raises(LLMResponseError):
        extract_json_object(text)

def test_llm_invalid_json_from_client(fake_provider_factory):
    client = LLMClient(provider=fake_provider_factory("INVALID OUTPUT"))
    with pytest.raises(LLMResponseError):
        client.complete_json("Anything")
