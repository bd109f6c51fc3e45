"""Analytics data generation across categories, platforms and day windows."""

from formulae_site.analytics.categories import (
    AnalyticsCategory,
    CategoryKind,
    TargetOs,
    categories_for,
)
from formulae_site.analytics.matrix import (
    AnalyticsCell,
    AnalyticsMatrixGenerator,
    AnalyticsRunSummary,
    iter_cells,
    render_api_file,
)
from formulae_site.analytics.setup import setup_analytics

__all__ = [
    "AnalyticsCategory",
    "AnalyticsCell",
    "AnalyticsMatrixGenerator",
    "AnalyticsRunSummary",
    "CategoryKind",
    "TargetOs",
    "categories_for",
    "iter_cells",
    "render_api_file",
    "setup_analytics",
]
