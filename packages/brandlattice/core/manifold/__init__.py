"""Visual state distance and brand subspace membership."""

from brandlattice.core.manifold.brand import BrandReport, brand_report, is_on_brand
from brandlattice.core.manifold.metric import CategoryDistances, category_distances, distance

__all__ = [
    "BrandReport",
    "CategoryDistances",
    "brand_report",
    "category_distances",
    "distance",
    "is_on_brand",
]
