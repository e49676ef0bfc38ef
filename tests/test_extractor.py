"""Tests for image extraction from provider responses."""

import base64

import pytest

from helpers import SVG_DOC, inline_response, text_response
from logo_studio.core.errors import ContentBlockedError, ExtractionFailedError
from logo_studio.image.encoder import parse_data_uri
from logo_studio.image.extractor import extract_image, extract_svg_fragment


def decoded_svg(data_uri):
    mime, payload = parse_data_uri(data_uri)
    assert mime == "image/svg+xml"
    return base64.b64decode(payload).decode("utf-8")


class TestExtractSvgFragment:
    def test_plain_document(self):
        assert extract_svg_fragment(SVG_DOC) == SVG_DOC

    def test_discards_prose_and_fences(self):
        text = f"Here is your logo:\n```xml\n{SVG_DOC}\n```\nLet me know if you need changes."
        assert extract_svg_fragment(text) == SVG_DOC

    def test_nested_svg_is_kept_whole(self):
        nested = '<svg viewBox="0 0 10 10"><svg x="1"><rect/></svg><circle/></svg>'
        assert extract_svg_fragment(f"prefix {nested} suffix") == nested

    def test_only_first_fragment(self):
        second = '<svg id="second"></svg>'
        assert extract_svg_fragment(SVG_DOC + "\n" + second) == SVG_DOC

    def test_case_insensitive(self):
        doc = '<SVG viewBox="0 0 1 1"></SVG>'
        assert extract_svg_fragment(f"x {doc} y") == doc

    def test_self_closing(self):
        assert extract_svg_fragment('text <svg width="1"/> more') == '<svg width="1"/>'

    def test_unclosed_tag_yields_nothing(self):
        assert extract_svg_fragment('<svg viewBox="0 0 1 1"><rect/>') is None

    def test_bare_tag_in_prose_before_document(self):
        text = "I wrapped everything in a single <svg> root element:\n```xml\n" + SVG_DOC + "\n```"
        assert extract_svg_fragment(text) == SVG_DOC

    def test_stray_opening_tag_after_unbalanced_start(self):
        text = "Start with <svg> then <svg viewBox=\"0 0 1 1\"><svg x=\"1\"></svg></svg>"
        assert extract_svg_fragment(text) == '<svg viewBox="0 0 1 1"><svg x="1"></svg></svg>'

    def test_similar_tag_names_are_ignored(self):
        assert extract_svg_fragment("<svgish></svgish>") is None

    def test_empty_text(self):
        assert extract_svg_fragment("") is None


class TestExtractImage:
    def test_inline_image_passes_through(self):
        assert extract_image(inline_response("QUJD", "image/jpeg")) == "data:image/jpeg;base64,QUJD"

    def test_inline_image_wins_over_text(self):
        response = inline_response("QUJD")
        response["candidates"][0]["content"]["parts"].insert(0, {"text": SVG_DOC})
        assert extract_image(response) == "data:image/png;base64,QUJD"

    def test_svg_inside_prose_is_reencoded(self):
        response = text_response(f"Sure! ```svg\n{SVG_DOC}\n``` Enjoy.")
        assert decoded_svg(extract_image(response)) == SVG_DOC

    def test_text_split_across_parts(self):
        response = {
            "candidates": [
                {"content": {"parts": [{"text": '<svg viewBox="0 0 1 1">'}, {"text": "</svg>"}]}}
            ]
        }
        assert decoded_svg(extract_image(response)) == '<svg viewBox="0 0 1 1">\n</svg>'

    def test_no_image_no_markup_fails(self):
        with pytest.raises(ExtractionFailedError) as exc_info:
            extract_image(text_response("I imagine a fox made of triangles."))
        assert "refine your request" in exc_info.value.message

    def test_empty_response_fails(self):
        with pytest.raises(ExtractionFailedError):
            extract_image({})

    def test_prompt_block_is_reported(self):
        with pytest.raises(ContentBlockedError):
            extract_image({"promptFeedback": {"blockReason": "SAFETY"}})

    def test_safety_finish_reason_is_reported(self):
        response = {"candidates": [{"content": {"parts": []}, "finishReason": "IMAGE_SAFETY"}]}
        with pytest.raises(ContentBlockedError):
            extract_image(response)

    @pytest.mark.parametrize(
        "response",
        [
            [],
            {"candidates": "oops"},
            {"candidates": ["oops"]},
            {"candidates": [{"content": "oops"}]},
            {"candidates": [{"content": {"parts": "oops"}}]},
            {"candidates": [{"content": {"parts": ["oops", {"inlineData": "x"}]}}]},
        ],
    )
    def test_malformed_shapes_fail_as_extraction(self, response):
        with pytest.raises(ExtractionFailedError):
            extract_image(response)

    def test_malformed_parts_are_skipped(self):
        response = {"candidates": [{"content": {"parts": ["oops", {"text": SVG_DOC}]}}]}
        assert decoded_svg(extract_image(response)) == SVG_DOC
