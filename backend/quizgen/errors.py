from typing import Optional


class QuizServiceError(Exception):
    """
    Base class for every anticipated failure of the upload and quiz pipelines.

    `message` is safe to show to clients. `detail` carries internal context
    (upstream errors, raw model output) and is only ever logged.
    """
    status_code = 500
    reason = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


# -------------------------Client input-------------------------
class NoFileProvided(QuizServiceError):
    status_code = 400
    reason = "no_file_provided"
    default_message = "No file uploaded"


class NoTextProvided(QuizServiceError):
    status_code = 400
    reason = "no_text_provided"
    default_message = "No text provided"


# -------------------------Extraction-------------------------
class ExtractionFailure(QuizServiceError):
    """The uploaded document did not yield usable text."""


class ExtractionParseError(ExtractionFailure):
    reason = "parse_error"
    default_message = "Failed to parse PDF"


class ExtractionEmptyResult(ExtractionFailure):
    # scanned or image-only documents end up here
    reason = "empty_result"
    default_message = "No extractable text found in PDF"


# -------------------------Generation-------------------------
class GenerationFailure(QuizServiceError):
    """The generation service could not produce a usable quiz."""


class UpstreamUnreachable(GenerationFailure):
    reason = "upstream_unreachable"
    default_message = "Failed to generate questions"


class EmptyUpstreamResponse(GenerationFailure):
    reason = "empty_upstream_response"
    default_message = "Empty response from question generator"


class InvalidUpstreamFormat(GenerationFailure):
    reason = "invalid_upstream_format"
    default_message = "Invalid response format from question generator"
