"""Document id encoding."""

import base64


def encode_document_id(url: str) -> str:
    """Build a search-index document id from an article URL (base64, reversible)."""
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


def decode_document_id(document_id: str) -> str:
    """Recover the article URL from a document id."""
    return base64.b64decode(document_id.encode("ascii")).decode("utf-8")
