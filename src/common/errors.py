"""Domain errors raised across the pipeline."""

from __future__ import annotations

from pathlib import Path


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class TaxonomyError(PipelineError):
    """The tag definition file is unreadable or malformed."""


class CorpusFileError(PipelineError):
    """A corpus file could not be read or does not have the expected shape."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ExternalFetchError(PipelineError):
    """Fetching raw news for a date from the external source failed."""

    def __init__(self, news_date: str, reason: str) -> None:
        super().__init__(f"Failed to fetch news for {news_date}: {reason}")
        self.news_date = news_date
        self.reason = reason


class UnsupportedProviderError(PipelineError):
    """No model provider adapter matches the configured model id."""

    def __init__(self, model_id: str) -> None:
        super().__init__(f"Unsupported model provider for model id: {model_id}")
        self.model_id = model_id


class TaggingError(PipelineError):
    """Tagging a single article failed."""


class InvalidResponseShapeError(TaggingError):
    """The model response did not contain generated text where expected."""


class ThrottlingError(TaggingError):
    """The model provider signalled a rate limit."""


class MaxRetriesExceededError(TaggingError):
    """The model kept throttling until the retry budget was spent."""

    def __init__(self, title: str, attempts: int) -> None:
        super().__init__(f"Max retries ({attempts}) reached for tagging article: {title}")
        self.title = title
        self.attempts = attempts
