"""Error taxonomy shared by the codec, the generation clients and the controller."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_FILE = "invalid_file"
    FILE_READ_FAILED = "file_read_failed"
    MALFORMED_INPUT = "malformed_input"
    EMPTY_RESPONSE = "empty_response"
    MODEL_REFUSAL = "model_refusal"
    NO_IMAGE_PRODUCED = "no_image_produced"
    GENERATION_FAILED = "generation_failed"
    MISSING_CREDENTIAL = "missing_credential"


class RetouchError(RuntimeError):
    """Base class for every failure the controller knows how to describe."""

    kind: ErrorKind = ErrorKind.GENERATION_FAILED

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(detail or self.kind.value)


class InvalidFile(RetouchError):
    kind = ErrorKind.INVALID_FILE

    def __init__(self, reason: str, *, limit_bytes: int | None = None, detail: str | None = None) -> None:
        # reason is "type" or "size"
        self.reason = reason
        self.limit_bytes = limit_bytes
        super().__init__(detail or f"invalid file ({reason})")


class FileReadFailed(RetouchError):
    kind = ErrorKind.FILE_READ_FAILED


class MalformedInput(RetouchError):
    kind = ErrorKind.MALFORMED_INPUT


class EmptyResponse(RetouchError):
    kind = ErrorKind.EMPTY_RESPONSE


class ModelRefusal(RetouchError):
    kind = ErrorKind.MODEL_REFUSAL


class NoImageProduced(RetouchError):
    kind = ErrorKind.NO_IMAGE_PRODUCED


class GenerationFailed(RetouchError):
    kind = ErrorKind.GENERATION_FAILED


class MissingCredential(RetouchError):
    kind = ErrorKind.MISSING_CREDENTIAL
