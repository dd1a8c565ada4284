"""Entrypoint table - single source of truth for operation names and prices."""

from dataclasses import dataclass

PRICE_HEADER = "X-Entrypoint-Price"


@dataclass(frozen=True)
class EntrypointSpec:
    """A registry operation and its fixed per-call charge.

    ``price`` is in minor currency units; 1000 units is $0.001.
    """

    key: str
    description: str
    price: int = 0

    @property
    def free(self) -> bool:
        return self.price == 0


ENTRYPOINTS: dict[str, EntrypointSpec] = {
    spec.key: spec
    for spec in (
        EntrypointSpec(
            key="overview",
            description="Free overview of the AI model registry - total models, providers, categories",
            price=0,
        ),
        EntrypointSpec(
            key="lookup",
            description=(
                'Look up a specific AI model by ID (e.g., "openai/gpt-4o", '
                '"anthropic/claude-3.5-sonnet")'
            ),
            price=1000,
        ),
        EntrypointSpec(
            key="search",
            description="Search AI models by query, filter by modality, context length, or price range",
            price=2000,
        ),
        EntrypointSpec(
            key="top",
            description="Get top AI models by metric: cheapest, longest context, newest, or free",
            price=2000,
        ),
        EntrypointSpec(
            key="compare",
            description="Compare multiple AI models side-by-side on pricing, context, and capabilities",
            price=3000,
        ),
        EntrypointSpec(
            key="report",
            description=(
                "Comprehensive report on a model including pricing analysis and similar alternatives"
            ),
            price=5000,
        ),
    )
}


def get_entrypoint(key: str) -> EntrypointSpec:
    """Get an entrypoint spec by key.

    Raises:
        KeyError: If no such entrypoint exists.
    """
    return ENTRYPOINTS[key]


def free_entrypoints() -> list[str]:
    return [key for key, spec in ENTRYPOINTS.items() if spec.free]


def paid_entrypoints() -> list[str]:
    return [key for key, spec in ENTRYPOINTS.items() if not spec.free]
