"""Chart kinds built on the shared dirty-tracking lifecycle."""
from chartgallery.charts.line_selector import LineSelectorChart
from chartgallery.charts.ternary import TernaryChart

__all__ = ["LineSelectorChart", "TernaryChart"]
