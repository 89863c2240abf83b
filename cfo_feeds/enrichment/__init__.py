"""Item enrichment: representative image resolution."""

from .image_resolver import ImageResolver, normalize_image_url

__all__ = ["ImageResolver", "normalize_image_url"]
