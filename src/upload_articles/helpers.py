"""Helper functions for upload_articles CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional


def parse_upload_articles_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for upload_articles."""

    parser = argparse.ArgumentParser(description="Bulk-index tagged news files.")
    parser.add_argument("--tagged-dir", type=Path, default=None, help="Tagged news directory (default: $TAGGED_NEWS_DIR)")
    parser.add_argument("--endpoint", default=None, help="OpenSearch endpoint (default: $OPENSEARCH_ENDPOINT)")
    parser.add_argument("--index", default=None, help="Index name (default: $OPENSEARCH_INDEX or news-articles)")
    return parser.parse_args(argv)
