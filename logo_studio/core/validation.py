"""Local validation of generation requests.

Both the studio controller (before any network call) and the relay endpoint
(before contacting the provider) run the same rules:

- `modernize` needs at least one reference image.
- `create` needs a non-blank brief or at least one reference image.
- No more than `MAX_REFERENCE_IMAGES` reference images.
"""

from logo_studio.core.errors import InputValidationError
from logo_studio.core.types import MAX_REFERENCE_IMAGES, GenerationRequest, Mode


MODERNIZE_NEEDS_IMAGE = "To revive your brand, please upload at least one reference image."
CREATE_NEEDS_INPUT = "Please provide a description or an image reference for your new logo."
TOO_MANY_IMAGES = f"Please use at most {MAX_REFERENCE_IMAGES} reference images."


def validate_request(request: GenerationRequest) -> None:
    """Raise `InputValidationError` when `request` cannot be generated."""
    image_count = len(request.reference_images)

    if image_count > MAX_REFERENCE_IMAGES:
        raise InputValidationError(TOO_MANY_IMAGES)

    if request.mode is Mode.MODERNIZE and image_count == 0:
        raise InputValidationError(MODERNIZE_NEEDS_IMAGE)

    if request.mode is Mode.CREATE and image_count == 0 and not request.prompt_text.strip():
        raise InputValidationError(CREATE_NEEDS_INPUT)
