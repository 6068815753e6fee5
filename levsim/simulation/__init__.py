from levsim.simulation.strategy import (
    PricingStrategy, SamplingStrategy, AlternatingStrategy, create_pricing_strategy
)
from levsim.simulation.runner import simulate_price_histories, simulate_variants
