"""Public model identifiers and their provider model names.

Only OpenAI is wired up. The Gemini and Claude entries are offered in the UI
but are served by the default OpenAI model.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

DEFAULT_MODEL = "gpt-4"
DEFAULT_PROVIDER_MODEL = "gpt-4"

# Identifiers shown to users, in display order
ADVERTISED_MODELS: tuple[str, ...] = ("gemini-2.5-pro", "claude-3", "gpt-4")

MODEL_MAP: Mapping[str, str] = MappingProxyType(
    {
        "gpt-4": "gpt-4",
        # Not implemented: falls back to the default provider model
        "gemini-2.5-pro": DEFAULT_PROVIDER_MODEL,
        # Not implemented: falls back to the default provider model
        "claude-3": DEFAULT_PROVIDER_MODEL,
    }
)

# Models whose name does not match the provider actually serving them
UNIMPLEMENTED_MODELS: frozenset[str] = frozenset({"gemini-2.5-pro", "claude-3"})


def validate_model_map(
    mapping: Mapping[str, str], advertised: Iterable[str]
) -> None:
    """Check that every advertised identifier has a provider model.

    Raises:
        RuntimeError: If any advertised identifier is missing from the map.
    """
    missing = sorted(set(advertised) - set(mapping))
    if missing:
        raise RuntimeError(f"Model map is missing advertised models: {', '.join(missing)}")


def resolve_model(model: str | None, default: str = DEFAULT_MODEL) -> str:
    """Map a public model identifier to the provider model name.

    A missing identifier is replaced by `default` before lookup. Unknown
    identifiers resolve to the default provider model.
    """
    return MODEL_MAP.get(model or default, DEFAULT_PROVIDER_MODEL)


validate_model_map(MODEL_MAP, ADVERTISED_MODELS)
