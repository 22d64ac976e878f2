from __future__ import annotations

import pytest

from retouch_engine.errors import (
    EmptyResponse,
    ErrorKind,
    FileReadFailed,
    GenerationFailed,
    InvalidFile,
    MalformedInput,
    MissingCredential,
    ModelRefusal,
    NoImageProduced,
)
from retouch_engine.messages import describe_error


def test_every_kind_has_an_english_message() -> None:
    samples = [
        InvalidFile("type"),
        FileReadFailed("disk"),
        MalformedInput("bad"),
        EmptyResponse(),
        ModelRefusal("no"),
        NoImageProduced(),
        GenerationFailed("boom"),
        MissingCredential(),
    ]
    assert {sample.kind for sample in samples} == set(ErrorKind)
    for sample in samples:
        text = describe_error(sample)
        assert text
        assert "{" not in text


@pytest.mark.parametrize("locale", ["ar", "ar-EG", "AR_sa"])
def test_arabic_refusal_includes_model_reply(locale: str) -> None:
    text = describe_error(ModelRefusal("لا أستطيع"), locale)
    assert text == "تعذر تحويل الصورة. رد النموذج: لا أستطيع"


def test_generation_failed_uses_detail_or_fallback() -> None:
    assert describe_error(GenerationFailed("503 UNAVAILABLE")) == "503 UNAVAILABLE"
    assert describe_error(GenerationFailed("")) == "An unexpected error occurred while processing the image."


def test_size_message_reports_limit() -> None:
    text = describe_error(InvalidFile("size", limit_bytes=5 * 1024 * 1024))
    assert text == "The image is too large. Please choose an image under 5 MB."


def test_unknown_locale_falls_back_to_english() -> None:
    assert describe_error(EmptyResponse(), "fr") == "No response was received from the model."
