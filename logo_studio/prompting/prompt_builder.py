"""Instruction templates and provider payload assembly for logo generation.

This module only builds strings and request bodies from already validated
inputs. Validation, transport and response parsing happen elsewhere.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed ordering of payload parts: reference images first, instruction last.
    - No I/O and no global state mutation (skipped images are only logged).

Template policy:
    The instruction text is fixed and not user-configurable. It steers the
    model toward a clean graphical mark and materially affects output style;
    change it only together with any stored outputs that must stay comparable.
"""

import logging

from logo_studio.core.types import GenerationRequest, Mode
from logo_studio.image.encoder import parse_data_uri


logger = logging.getLogger(__name__)


# =========================================================
# SHARED DIRECTIVES
# =========================================================
# Appended to both mode templates, before the user brief.

PERFECTION_DIRECTIVES = (
    "ESTABLISH ARCHITECTURAL BRAND PERFECTION:\n"
    "1. SYMBOLISM OVER ILLUSTRATION: Create a distinct, iconic mark. Avoid complex, "
    "busy illustrations or photorealistic scenes.\n"
    "2. ZERO GIBBERISH: Do not generate random characters, fake words, or \"AI text\" "
    "unless explicitly asked for specific letters.\n"
    "3. GEOMETRIC PRECISION: Use mathematically balanced shapes, perfect circles, and "
    "clean vectors. Ensure visual weight is centered.\n"
    "4. FLAT AESTHETIC: Prioritize solid colors and clean negative space. No fuzzy "
    "edges, no messy gradients, and no over-detailed textures.\n"
    "5. LEGIBILITY: The mark must be high-contrast and recognizable at all scales.\n"
    "6. ENVIRONMENT: Output the logo clearly centered on a solid, clean, high-contrast "
    "background.\n"
    "7. OUTPUT: Return the finished logo as an image. If you can only answer in text, "
    "return a single standalone SVG document using a 512x512 viewBox, starting with "
    "<svg and ending with </svg>, with no markdown fences.\n"
)


# =========================================================
# MODE TEMPLATES
# =========================================================
# Modernize behaves as a vectorizer: it rebuilds the supplied reference.
# Create behaves as a designer: it invents a mark from the brief, using any
# supplied images only as style references.

MODERNIZE_TEMPLATE = (
    "TASK: BRAND REVIVAL & MODERNIZATION.\n"
    "{directives}\n"
    "INSTRUCTION: Analyze the visual DNA of the provided reference. Reconstruct it "
    "into a modern, high-fidelity professional logo that feels timeless and premium. "
    "Eliminate all noise, blur, and dated artifacts.\n"
    "BRIEF: {brief}"
)

CREATE_TEMPLATE = (
    "TASK: FORGE NEW IDENTITY.\n"
    "{directives}\n"
    "INSTRUCTION: Based on the creative brief, synthesize a groundbreaking, symbolic "
    "brand mark. Focus on high-concept visual metaphors and professional symmetry. "
    "Treat any provided images as style references only.\n"
    "BRIEF: {brief}"
)

TEMPLATES = {
    Mode.MODERNIZE: MODERNIZE_TEMPLATE,
    Mode.CREATE: CREATE_TEMPLATE,
}

EMPTY_BRIEFS = {
    Mode.MODERNIZE: "Keep the original concept; modernize it faithfully.",
    Mode.CREATE: "Derive the concept from the provided style references.",
}


def build_instruction(mode: Mode, user_prompt: str) -> str:
    """Return the full instruction text for `mode` and the user's brief.

    Edge cases:
        A blank brief is replaced by a mode-specific default so the model is
        never handed an empty `BRIEF:` line.
    """
    mode = Mode(mode)
    brief = (user_prompt or "").strip() or EMPTY_BRIEFS[mode]
    return TEMPLATES[mode].format(directives=PERFECTION_DIRECTIVES, brief=brief)


# =========================================================
# PROVIDER PAYLOAD
# =========================================================
# Gemini `generateContent` body:
#   contents[0].parts = [inlineData (one per reference image)..., text]
#   generationConfig  = image + text modalities, square aspect ratio

def compose_generation_payload(request: GenerationRequest) -> dict:
    """Build the provider request body for a validated generation request."""
    parts = []

    for index, data_uri in enumerate(request.reference_images, start=1):
        try:
            mime_type, data = parse_data_uri(data_uri)
        except ValueError as exc:
            logger.error("Skipping reference image %d: %s", index, exc)
            continue

        parts.append({"inlineData": {"mimeType": mime_type, "data": data}})
        logger.info("Attached image %d (%s)", index, mime_type)

    parts.append({"text": build_instruction(request.mode, request.prompt_text)})

    return {
        "contents": [{"role": "user", "parts": parts}],
        "generationConfig": {
            "responseModalities": ["TEXT", "IMAGE"],
            "imageConfig": {"aspectRatio": "1:1"},
        },
    }
