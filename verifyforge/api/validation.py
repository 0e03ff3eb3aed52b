"""Validation of submission requests."""

from collections.abc import Mapping
from typing import Any

from aiohttp.web import FileField

from verifyforge.models.job import Mode, Target, TestType
from verifyforge.orchestrator import Submission


class RequestValidationError(Exception):
    """Raised when a request is missing or has invalid fields."""


def parse_submission(form: Mapping[str, Any]) -> Submission:
    """Build a submission from multipart form fields.

    Raises:
        RequestValidationError: If test_type is missing or unknown, or
            neither target_url nor file is given

    """
    raw_type = str(form.get("test_type") or "").strip()
    if not raw_type:
        raise RequestValidationError("Missing required field: test_type")
    try:
        test_type = TestType(raw_type.lower())
    except ValueError:
        valid = ", ".join(t.value for t in TestType)
        raise RequestValidationError(
            f"Invalid test_type. Must be one of: {valid}"
        ) from None

    target_url = str(form.get("target_url") or "").strip() or None
    upload = form.get("file")
    if not isinstance(upload, FileField):
        upload = None

    if target_url is None and upload is None:
        raise RequestValidationError("Either target_url or file is required")

    target = Target(
        url=target_url,
        filename=(upload.filename or "uploaded-file") if upload else None,
        content=upload.file.read() if upload else b"",
    )
    mode = Mode.parse(form.get("economy_mode"))

    return Submission(test_type=test_type, target=target, mode=mode)
