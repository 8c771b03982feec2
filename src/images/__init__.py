"""Image pipeline for media referenced by posts and blocks."""

from .image_pipeline import (
    ImagePipeline,
    ImageResult,
    ImageStatus,
    ImageProcessingError,
)

__all__ = [
    'ImagePipeline',
    'ImageResult',
    'ImageStatus',
    'ImageProcessingError',
]
