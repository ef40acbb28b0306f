"""Multipart request parsing for ``POST /api/generate``.

This module isolates form decoding and image sniffing from
``onmodel.api.main`` so route handlers stay focused on HTTP concerns.

The generate form carries two fields:

- ``image`` — the product photo file.
- ``payload`` — a JSON string matching :class:`GeneratePayload`.

Every problem with either field is raised as
:class:`~onmodel.core.errors.BatchValidationError` with a message suitable
for display, before any generation job is started.
"""

from __future__ import annotations

import io
import json
import logging

from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from onmodel.api.models import GeneratePayload
from onmodel.core.errors import BatchValidationError
from onmodel.core.models import DEFAULT_IMAGE_MIME, ReferenceImage

logger = logging.getLogger(__name__)


def read_reference_image(data: bytes | None, declared_mime: str | None) -> ReferenceImage:
    """Validate uploaded bytes and settle on a MIME type.

    The declared content type is trusted when it is an ``image/*`` type.
    Otherwise the type Pillow detects is used, and ``image/png`` as a last
    resort.

    Args:
        data: Raw file bytes, or ``None`` if no file was sent.
        declared_mime: Content type declared by the client.

    Returns:
        The reference image to send to the provider.

    Raises:
        BatchValidationError: If no file was sent or it is not a readable
            image.
    """
    if not data:
        raise BatchValidationError("Product image is required.")

    try:
        with Image.open(io.BytesIO(data)) as img:
            detected = Image.MIME.get(img.format or "")
            img.verify()
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        logger.info("Rejected upload that Pillow could not read: %s", e)
        raise BatchValidationError("Uploaded file is not a readable image.") from e

    if declared_mime and declared_mime.startswith("image/"):
        mime = declared_mime
    else:
        mime = detected or DEFAULT_IMAGE_MIME
    return ReferenceImage(data=data, mime_type=mime)


def parse_generate_payload(raw: str | None) -> GeneratePayload:
    """Decode and validate the JSON ``payload`` form field.

    Raises:
        BatchValidationError: If the field is missing, is not JSON, has no
            combos list, or fails validation.
    """
    if raw is None:
        raise BatchValidationError("Missing generation payload.")

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise BatchValidationError("Invalid payload.") from e

    if not isinstance(data, dict):
        raise BatchValidationError("Invalid payload.")
    if not isinstance(data.get("combos"), list) or not data["combos"]:
        raise BatchValidationError("No generation combos provided.")

    try:
        return GeneratePayload.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise BatchValidationError(f"Invalid payload: {location}: {first['msg']}") from e
