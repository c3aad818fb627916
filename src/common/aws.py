"""AWS clients: Bedrock model invocation and OpenSearch."""

import json
import logging
from typing import Any, Mapping, Optional

import boto3
from botocore.exceptions import ClientError

from common.errors import InvalidResponseShapeError, ThrottlingError

logger = logging.getLogger(__name__)

THROTTLING_ERROR_CODES = frozenset({"ThrottlingException", "TooManyRequestsException"})


def get_bedrock_client(region: Optional[str] = None):
    """Create Bedrock runtime client."""
    return boto3.client("bedrock-runtime", region_name=region)


def invoke_model(client: Any, model_id: str, body: Mapping[str, Any]) -> Any:
    """
    Invoke a Bedrock model with a JSON request body.

    Args:
        client: bedrock-runtime client
        model_id: Bedrock model id (e.g. "amazon.nova-lite-v1:0")
        body: Provider-specific request body

    Returns:
        Decoded JSON response body

    Raises:
        InvalidResponseShapeError: If the response has no body or the body is
            not JSON.
    """
    response = client.invoke_model(
        modelId=model_id,
        contentType="application/json",
        accept="application/json",
        body=json.dumps(body),
    )
    stream = response.get("body") if isinstance(response, Mapping) else None
    if stream is None:
        raise InvalidResponseShapeError(f"Response from {model_id} has no body")

    raw = stream.read()
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, TypeError) as exc:
        raise InvalidResponseShapeError(f"Response from {model_id} is not valid JSON: {exc}") from exc


def is_throttling_error(exc: BaseException) -> bool:
    """True if the error is a provider rate-limit signal."""
    if isinstance(exc, ThrottlingError):
        return True
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code")
        return code in THROTTLING_ERROR_CODES
    return False


def get_opensearch_client(endpoint: str, region: Optional[str] = None, service: str = "aoss"):
    """Create an OpenSearch client signed with the default AWS credentials."""
    from opensearchpy import AWSV4SignerAuth, OpenSearch, RequestsHttpConnection

    session = boto3.Session(region_name=region)
    credentials = session.get_credentials()
    auth = AWSV4SignerAuth(credentials, session.region_name, service)

    host = endpoint.replace("https://", "").replace("http://", "").rstrip("/")
    logger.info("Connecting to OpenSearch at %s", host)
    return OpenSearch(
        hosts=[{"host": host, "port": 443}],
        http_auth=auth,
        use_ssl=True,
        verify_certs=True,
        connection_class=RequestsHttpConnection,
        pool_maxsize=20,
    )
