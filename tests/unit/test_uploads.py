"""Tests for onmodel.api.uploads — multipart field decoding."""

from __future__ import annotations

import io
import json
import struct
import zlib

import pytest
from PIL import Image

from onmodel.api.uploads import parse_generate_payload, read_reference_image
from onmodel.core.errors import BatchValidationError

_COMBO = {
    "id": "c1",
    "shotId": "detail",
    "shotPrompt": "tight crop",
    "modelId": "editorial",
    "modelPrompt": "tall editorial runway model",
}


class TestReadReferenceImage:
    def test_declared_image_type_is_kept(self, png_bytes):
        image = read_reference_image(png_bytes, "image/webp")
        assert image.mime_type == "image/webp"
        assert image.data == png_bytes

    @pytest.mark.parametrize("declared", [None, "", "application/octet-stream"])
    def test_detected_type_when_not_declared(self, declared):
        buffer = io.BytesIO()
        Image.new("RGB", (4, 4)).save(buffer, format="JPEG")
        image = read_reference_image(buffer.getvalue(), declared)
        assert image.mime_type == "image/jpeg"

    @pytest.mark.parametrize("data", [None, b""])
    def test_missing_image(self, data):
        with pytest.raises(BatchValidationError, match="Product image is required."):
            read_reference_image(data, "image/png")

    def test_unreadable_bytes(self):
        with pytest.raises(BatchValidationError, match="not a readable image"):
            read_reference_image(b"definitely not an image", "image/png")

    def test_oversized_image_header(self, png_bytes):
        """A header claiming a decompression-bomb sized image is rejected."""
        # Patch the IHDR width/height of a real PNG and recompute its CRC.
        ihdr_start = 8
        length = struct.unpack(">I", png_bytes[ihdr_start : ihdr_start + 4])[0]
        chunk_type = png_bytes[ihdr_start + 4 : ihdr_start + 8]
        body = struct.pack(">II", 30000, 30000) + png_bytes[ihdr_start + 16 : ihdr_start + 8 + length]
        crc = struct.pack(">I", zlib.crc32(chunk_type + body) & 0xFFFFFFFF)
        patched = png_bytes[: ihdr_start + 8] + body + crc + png_bytes[ihdr_start + 12 + length :]

        with pytest.raises(BatchValidationError, match="Uploaded file is not a readable image."):
            read_reference_image(patched, "image/png")

    def test_data_uri(self, png_bytes):
        uri = read_reference_image(png_bytes, "image/png").to_data_uri()
        assert uri.startswith("data:image/png;base64,iVBOR")


class TestParseGeneratePayload:
    def test_valid_payload(self):
        payload = parse_generate_payload(json.dumps({"vibe": "street", "combos": [_COMBO]}))
        assert payload.vibe == "street"
        assert [c.id for c in payload.combos] == ["c1"]

    def test_missing_payload(self):
        with pytest.raises(BatchValidationError, match="Missing generation payload."):
            parse_generate_payload(None)

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"'])
    def test_invalid_json(self, raw):
        with pytest.raises(BatchValidationError, match="Invalid payload."):
            parse_generate_payload(raw)

    @pytest.mark.parametrize("combos", [None, [], "front-hero", {"id": "c1"}])
    def test_no_combos(self, combos):
        raw = json.dumps({"vibe": "luxury", "combos": combos})
        with pytest.raises(BatchValidationError, match="No generation combos provided."):
            parse_generate_payload(raw)

    def test_malformed_combo(self):
        raw = json.dumps({"combos": [{"id": "c1"}]})
        with pytest.raises(BatchValidationError, match="Invalid payload: combos.0"):
            parse_generate_payload(raw)
