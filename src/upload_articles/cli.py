"""CLI for uploading tagged news to OpenSearch."""

from __future__ import annotations

import logging
from typing import Optional

from common.aws import get_opensearch_client
from common.cli_helpers import setup_logging
from common.config import load_config
from upload_articles.helpers import parse_upload_articles_args
from upload_articles.upload_articles import upload_tagged_files

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> None:
    setup_logging()
    args = parse_upload_articles_args(argv)
    config = load_config()

    endpoint = args.endpoint or config.opensearch_endpoint
    if not endpoint:
        logger.error("OPENSEARCH_ENDPOINT environment variable is not set.")
        raise SystemExit(1)

    client = get_opensearch_client(endpoint, config.aws_region)
    report = upload_tagged_files(
        args.tagged_dir or config.tagged_dir,
        client,
        args.index or config.opensearch_index,
    )
    report.log(logger)

    if report.failed or report.skipped:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
