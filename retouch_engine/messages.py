"""User-facing messages, and the reducer that turns failures into one line of text."""

from __future__ import annotations

from .config import normalize_locale
from .errors import ErrorKind, InvalidFile, RetouchError

NO_IMAGE = "no_image"
EMPTY_PROMPT = "empty_prompt"
INVALID_TYPE = "invalid_type"
INVALID_SIZE = "invalid_size"
UNEXPECTED = "unexpected"

_CATALOG: dict[str, dict[str, str]] = {
    "en": {
        NO_IMAGE: "Please choose an image before transforming it.",
        EMPTY_PROMPT: "Please describe the edit you want.",
        INVALID_TYPE: "Please choose a valid image file (JPG, PNG, WebP).",
        INVALID_SIZE: "The image is too large. Please choose an image under {limit_mb} MB.",
        ErrorKind.FILE_READ_FAILED.value: "Failed to read the image file.",
        ErrorKind.MALFORMED_INPUT.value: "The selected image could not be decoded.",
        ErrorKind.EMPTY_RESPONSE.value: "No response was received from the model.",
        ErrorKind.MODEL_REFUSAL.value: "The image could not be transformed. Model reply: {detail}",
        ErrorKind.NO_IMAGE_PRODUCED.value: "No image was found in the model response.",
        ErrorKind.GENERATION_FAILED.value: "{detail}",
        ErrorKind.MISSING_CREDENTIAL.value: "No API key is configured (set GEMINI_API_KEY).",
        UNEXPECTED: "An unexpected error occurred while processing the image.",
    },
    "ar": {
        NO_IMAGE: "الرجاء اختيار صورة قبل التعديل.",
        EMPTY_PROMPT: "الرجاء إدخال وصف للتعديل المطلوب.",
        INVALID_TYPE: "الرجاء اختيار ملف صورة صالح (JPG, PNG, WebP)",
        INVALID_SIZE: "حجم الصورة كبير جداً. الرجاء اختيار صورة أقل من {limit_mb} ميجابايت.",
        ErrorKind.FILE_READ_FAILED.value: "فشل في قراءة ملف الصورة.",
        ErrorKind.MALFORMED_INPUT.value: "تعذر فك ترميز الصورة المختارة.",
        ErrorKind.EMPTY_RESPONSE.value: "لم يتم استلام أي استجابة من النموذج.",
        ErrorKind.MODEL_REFUSAL.value: "تعذر تحويل الصورة. رد النموذج: {detail}",
        ErrorKind.NO_IMAGE_PRODUCED.value: "لم يتم العثور على صورة في استجابة النموذج.",
        ErrorKind.GENERATION_FAILED.value: "{detail}",
        ErrorKind.MISSING_CREDENTIAL.value: "لم يتم إعداد مفتاح API (GEMINI_API_KEY).",
        UNEXPECTED: "حدث خطأ غير متوقع أثناء معالجة الصورة.",
    },
}


def message(key: str, locale: str = "en", **values: object) -> str:
    catalog = _CATALOG[normalize_locale(locale)]
    template = catalog.get(key) or _CATALOG["en"][key]
    return template.format(**values)


def describe_error(exc: RetouchError, locale: str = "en") -> str:
    if isinstance(exc, InvalidFile):
        if exc.reason == "size":
            limit = exc.limit_bytes or 0
            return message(INVALID_SIZE, locale, limit_mb=_format_megabytes(limit))
        return message(INVALID_TYPE, locale)
    detail = str(exc.detail or "").strip()
    if exc.kind in {ErrorKind.MODEL_REFUSAL, ErrorKind.GENERATION_FAILED} and not detail:
        return message(UNEXPECTED, locale)
    return message(exc.kind.value, locale, detail=detail)


def _format_megabytes(limit_bytes: int) -> str:
    megabytes = limit_bytes / (1024 * 1024)
    if megabytes == int(megabytes):
        return str(int(megabytes))
    return f"{megabytes:.1f}"
