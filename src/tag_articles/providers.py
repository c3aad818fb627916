"""Request/response shapes for the Bedrock model families used for tagging."""

import re
from dataclasses import dataclass
from typing import Any, Callable

from common.errors import InvalidResponseShapeError, UnsupportedProviderError

TEMPERATURE = 0.2

# Cross-region inference profiles prefix the model id, e.g. "us.anthropic.claude-...".
_INFERENCE_PROFILE_PREFIX = re.compile(r"^(us|eu|apac|us-gov|global)\.")


@dataclass(frozen=True)
class ModelProvider:
    """Wire format for one model family, matched by model id prefix."""
    name: str
    prefixes: tuple[str, ...]
    build_request_body: Callable[[str, str], dict[str, Any]]
    parse_response_text: Callable[[Any], str]

    def can_handle(self, model_id: str) -> bool:
        return base_model_id(model_id).startswith(self.prefixes)


def base_model_id(model_id: str) -> str:
    """Model id with any cross-region inference profile prefix removed."""
    return _INFERENCE_PROFILE_PREFIX.sub("", model_id or "")


def _first_text(content: Any) -> Any:
    if isinstance(content, list) and content and isinstance(content[0], dict):
        return content[0].get("text")
    return None


def _require_text(value: Any, provider: str) -> str:
    if not isinstance(value, str):
        raise InvalidResponseShapeError(f"Empty or invalid response from {provider} model")
    return value


# --- Anthropic Claude (Messages API) ---

def _anthropic_body(system_prompt: str, user_prompt: str) -> dict[str, Any]:
    return {
        "anthropic_version": "bedrock-2023-05-31",
        "system": system_prompt,
        "messages": [{"role": "user", "content": user_prompt}],
        "max_tokens": 500,
        "temperature": TEMPERATURE,
        "top_p": 0.9,
    }


def _anthropic_text(body: Any) -> str:
    content = body.get("content") if isinstance(body, dict) else None
    return _require_text(_first_text(content), "Anthropic")


# --- Amazon Nova ---

def _nova_body(system_prompt: str, user_prompt: str) -> dict[str, Any]:
    return {
        "system": [{"text": system_prompt}],
        "messages": [{"role": "user", "content": [{"text": user_prompt}]}],
        "inferenceConfig": {
            "maxTokens": 256,
            "stopSequences": [],
            "temperature": TEMPERATURE,
            "topP": 0.8,
        },
    }


def _nova_text(body: Any) -> str:
    output = body.get("output") if isinstance(body, dict) else None
    message = output.get("message") if isinstance(output, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return _require_text(_first_text(content), "Amazon Nova")


# --- Meta Llama 3 ---

def _llama_body(system_prompt: str, user_prompt: str) -> dict[str, Any]:
    prompt = (
        "<|begin_of_text|><|start_header_id|>system<|end_header_id|>\n\n"
        f"{system_prompt}<|eot_id|>"
        "<|start_header_id|>user<|end_header_id|>\n\n"
        f"{user_prompt}<|eot_id|>"
        "<|start_header_id|>assistant<|end_header_id|>\n\n"
    )
    return {
        "prompt": prompt,
        "max_gen_len": 256,
        "temperature": TEMPERATURE,
        "top_p": 0.9,
    }


def _llama_text(body: Any) -> str:
    generation = body.get("generation") if isinstance(body, dict) else None
    return _require_text(generation, "Meta Llama")


ANTHROPIC = ModelProvider(
    name="anthropic",
    prefixes=("anthropic.",),
    build_request_body=_anthropic_body,
    parse_response_text=_anthropic_text,
)

AMAZON_NOVA = ModelProvider(
    name="amazon-nova",
    prefixes=("amazon.nova",),
    build_request_body=_nova_body,
    parse_response_text=_nova_text,
)

META_LLAMA = ModelProvider(
    name="meta-llama",
    prefixes=("meta.llama",),
    build_request_body=_llama_body,
    parse_response_text=_llama_text,
)

PROVIDERS: tuple[ModelProvider, ...] = (ANTHROPIC, AMAZON_NOVA, META_LLAMA)


def select_provider(
    model_id: str,
    providers: tuple[ModelProvider, ...] = PROVIDERS,
) -> ModelProvider:
    """Return the first provider that handles the model id.

    Raises:
        UnsupportedProviderError: If no provider matches.
    """
    for provider in providers:
        if provider.can_handle(model_id):
            return provider
    raise UnsupportedProviderError(model_id)
