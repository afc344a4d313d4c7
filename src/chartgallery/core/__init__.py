"""Chart lifecycle contract and the materialized visuals charts hand to a render surface."""
from chartgallery.core.state import Chart, ComponentState

__all__ = ["Chart", "ComponentState"]
