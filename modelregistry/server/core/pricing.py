"""Price normalization for catalog records.

Upstream pricing is a pair of per-token decimal strings. This module folds
them into one comparable figure (the "derived price"):

    derived price = prompt cost per token + completion cost per token

and classifies models into pricing tiers:

    price == 0            -> free
    0 < price < 1e-6      -> budget
    1e-6 <= price < 1e-5  -> standard
    price >= 1e-5         -> premium

Both tier ceilings are exclusive, so a model at exactly 1e-5 per token is
premium. Multiply by TOKENS_PER_MILLION for "per 1M tokens" figures.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any

from modelregistry.server.discovery.base import ModelRecord, Pricing

TOKENS_PER_MILLION = 1_000_000

BUDGET_CEILING = 1e-6
STANDARD_CEILING = 1e-5

# Reference workload for report cost estimates
ESTIMATE_REQUESTS = 1000
ESTIMATE_PROMPT_TOKENS = 500
ESTIMATE_COMPLETION_TOKENS = 500


class PricingTier(str, Enum):
    FREE = "free"
    BUDGET = "budget"
    STANDARD = "standard"
    PREMIUM = "premium"


def parse_decimal(value: Any) -> float:
    """Parse an upstream decimal, defaulting to 0 for anything unusable.

    Negative values (OpenRouter uses "-1" for variable-price routers) and
    non-finite values also map to 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _pricing_of(source: ModelRecord | Pricing | None) -> Pricing | None:
    if isinstance(source, ModelRecord):
        return source.pricing
    return source


def prompt_price(source: ModelRecord | Pricing | None) -> float:
    pricing = _pricing_of(source)
    return parse_decimal(pricing.prompt) if pricing else 0.0


def completion_price(source: ModelRecord | Pricing | None) -> float:
    pricing = _pricing_of(source)
    return parse_decimal(pricing.completion) if pricing else 0.0


def price_of(source: ModelRecord | Pricing | None) -> float:
    """Return the derived per-token price of a record or pricing block.

    Args:
        source: A catalog record, its pricing block, or None.

    Returns:
        Prompt plus completion cost per token; 0 when pricing is absent.
    """
    return prompt_price(source) + completion_price(source)


def per_million(price: float) -> float:
    """Convert a per-token price to a per-1M-tokens price."""
    return price * TOKENS_PER_MILLION


def pricing_tier(price: float) -> PricingTier:
    """Classify a derived price into a tier."""
    if price == 0:
        return PricingTier.FREE
    if price < BUDGET_CEILING:
        return PricingTier.BUDGET
    if price < STANDARD_CEILING:
        return PricingTier.STANDARD
    return PricingTier.PREMIUM


def estimate_cost(
    source: ModelRecord | Pricing | None,
    requests: int = ESTIMATE_REQUESTS,
    prompt_tokens: int = ESTIMATE_PROMPT_TOKENS,
    completion_tokens: int = ESTIMATE_COMPLETION_TOKENS,
) -> float:
    """Estimate the cost of a workload in USD.

    Args:
        source: A catalog record or its pricing block.
        requests: Number of requests.
        prompt_tokens: Prompt tokens per request.
        completion_tokens: Completion tokens per request.

    Returns:
        Total estimated cost.
    """
    return requests * prompt_tokens * prompt_price(source) + (
        requests * completion_tokens * completion_price(source)
    )
