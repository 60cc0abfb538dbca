import json

import pytest

from geo_locator.analysis.parsing import (
    extract_json_text,
    extract_sources,
    parse_bilingual_reply,
    strip_citations,
)

PAYLOAD = {"en": "Eiffel Tower, Paris, France.", "ru": "Эйфелева башня, Париж, Франция."}


@pytest.mark.parametrize(
    "reply",
    [
        json.dumps(PAYLOAD),
        "```json\n" + json.dumps(PAYLOAD) + "\n```",
        "```\n" + json.dumps(PAYLOAD) + "\n```",
        "  \n```JSON " + json.dumps(PAYLOAD) + "```\n ",
        "Here you go:\n```json\n" + json.dumps(PAYLOAD) + "\n```\nEnjoy!",
    ],
)
def test_parse_bilingual_reply_handles_fences(reply):
    assert parse_bilingual_reply(reply) == PAYLOAD


def test_extract_json_text_leaves_unfenced_reply_trimmed():
    assert extract_json_text('  {"en": "a"}  \n') == '{"en": "a"}'


def test_extract_json_text_uses_first_block_only():
    reply = '```json\n{"en": "first"}\n```\n```json\n{"en": "second"}\n```'

    assert extract_json_text(reply) == '{"en": "first"}'


def test_extract_json_text_keeps_reply_when_fence_is_empty():
    assert extract_json_text("```json```") == "```json```"


def test_strip_citations_pins_spacing():
    assert strip_citations("Eiffel Tower [1], Paris [23].") == "Eiffel Tower , Paris ."
    assert strip_citations("  [4]Louvre[12]  ") == "Louvre"
    assert strip_citations("No markers [a] here [ 1 ].") == "No markers [a] here [ 1 ]."


def test_parse_bilingual_reply_strips_citations():
    reply = json.dumps({"en": "Big Ben [1] in London [2].", "ru": "Биг-Бен [3] в Лондоне."})

    assert parse_bilingual_reply(reply) == {"en": "Big Ben  in London .", "ru": "Биг-Бен  в Лондоне."}


@pytest.mark.parametrize(
    "reply",
    [
        "I could not find this place.",
        "```json\nnot json\n```",
        json.dumps(["en", "ru"]),
        json.dumps({"en": "Only English"}),
        json.dumps({"en": "[1]", "ru": "Текст"}),
    ],
)
def test_parse_bilingual_reply_rejects_unusable_output(reply):
    with pytest.raises(ValueError):
        parse_bilingual_reply(reply)


def test_extract_sources_without_metadata_is_empty(fakes):
    assert extract_sources(fakes.grounded_response("{}")) == []
    assert extract_sources(object()) == []


def test_extract_sources_keeps_variants_and_missing_uris(fakes):
    response = fakes.grounded_response(
        "{}",
        chunks=[
            fakes.web_chunk("https://example.com/eiffel", "Eiffel"),
            fakes.maps_chunk("https://maps.example/eiffel"),
            fakes.web_chunk(None, "No link"),
        ],
    )

    sources = extract_sources(response)

    assert [s.kind for s in sources] == ["web", "maps", "web"]
    assert sources[1].label == "Source Link"
    assert not sources[2].is_renderable
