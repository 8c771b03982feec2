"""Download and sanitize images referenced by posts and blocks.

Each image is downloaded once, best effort: a failed request or a non-200
response is logged and skipped, never raised. The body is streamed to a
temporary file next to the destination, then re-encoded with Pillow:

- JPEG (``content-type: image/jpeg``) is auto-rotated from its EXIF orientation
- if a target width is configured the image is resized and re-encoded as JPEG
- embedded metadata (EXIF, GPS, XMP, text chunks) is always dropped

The destination path is derived from the URL alone:
``<output_dir>/<second-to-last path segment>/<last path segment, unquoted>``.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote, unquote, urlparse

import requests
from PIL import Image, ImageOps, UnidentifiedImageError
from PIL.PngImagePlugin import PngInfo

from ..notion_api.errors import SyncError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = os.path.join('public', 'notion')
DEFAULT_WEB_PREFIX = '/notion'
CHUNK_SIZE = 64 * 1024
JPEG_QUALITY = 85

# Image.info keys that describe rendering rather than provenance
_KEPT_INFO_KEYS = ('transparency', 'duration', 'loop', 'background', 'disposal')


class ImageStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"


@dataclass
class ImageResult:
    """Outcome of one download.

    Attributes:
        url: Source URL
        status: SUCCESS or SKIPPED
        path: Local file path (set on success)
        web_path: Path renderers should reference (set on success)
        reason: Why the image was skipped
    """
    url: str
    status: ImageStatus
    path: Optional[str] = None
    web_path: Optional[str] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ImageStatus.SUCCESS


class ImageProcessingError(SyncError):
    """Raised internally when a downloaded image cannot be processed."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to process image {url}: {reason}")
        self.url = url
        self.reason = reason


class ImagePipeline:
    """Downloads images to a deterministic local layout.

    Example:
        >>> pipeline = ImagePipeline("public/notion", width=1200)
        >>> result = pipeline.fetch_and_store(block.payload.url)
        >>> if result.ok:
        ...     block.payload.file.local_path = result.web_path
    """

    def __init__(
        self,
        output_dir: str = DEFAULT_OUTPUT_DIR,
        width: Optional[int] = None,
        timeout_ms: int = 10000,
        session: Optional[requests.Session] = None,
        web_prefix: str = DEFAULT_WEB_PREFIX,
    ):
        """Initialize the pipeline.

        Args:
            output_dir: Root directory for downloaded images
            width: Target width in pixels; None keeps the original size and encoding
            timeout_ms: Timeout for the download request
            session: requests session to use (a new one if omitted)
            web_prefix: URL path under which output_dir is served
        """
        if width is not None and width < 1:
            raise ValueError(f"width must be positive, got {width}")
        self.output_dir = output_dir
        self.width = width
        self.timeout_ms = timeout_ms
        self.web_prefix = web_prefix.rstrip('/')
        self._session = session or requests.Session()

    def _segments(self, url: str):
        segments = urlparse(url).path.split('/')
        directory = unquote(segments[-2]) if len(segments) >= 2 else ''
        filename = unquote(segments[-1])
        for part in (directory, filename):
            if part in ('.', '..') or '/' in part or '\\' in part:
                raise ValueError(f"Unsafe path segment '{part}' in image URL")
        if not filename:
            raise ValueError("Image URL has no file name")
        return directory, filename

    def local_path_for(self, url: str) -> str:
        """Local file path for an image URL.

        Raises:
            ValueError: If the URL has no file name or an unsafe segment
        """
        directory, filename = self._segments(url)
        return os.path.join(self.output_dir, directory, filename)

    def web_path_for(self, url: str) -> str:
        directory, filename = self._segments(url)
        parts = [self.web_prefix] + [quote(p) for p in (directory, filename) if p]
        return '/'.join(parts)

    def fetch_and_store(self, url: str) -> ImageResult:
        """Download, sanitize and store one image.

        Never raises for network, HTTP or decoding problems; those produce
        a SKIPPED result and a log entry.

        Args:
            url: Image URL

        Returns:
            ImageResult describing what happened
        """
        try:
            destination = self.local_path_for(url)
        except ValueError as e:
            logger.error(f"Cannot store image {url}: {e}")
            return ImageResult(url=url, status=ImageStatus.SKIPPED, reason=str(e))

        try:
            response = self._session.get(url, stream=True, timeout=self.timeout_ms / 1000)
        except requests.RequestException as e:
            logger.error(f"Image download error for {url}: {e}")
            return ImageResult(url=url, status=ImageStatus.SKIPPED, reason=str(e))

        try:
            if response.status_code != 200:
                logger.error(f"Invalid response for {url}: {response.status_code}")
                return ImageResult(
                    url=url,
                    status=ImageStatus.SKIPPED,
                    reason=f"HTTP {response.status_code}",
                )

            content_type = response.headers.get('content-type', '').split(';')[0].strip().lower()
            self._store(response, url, destination, content_type)
        except (requests.RequestException, OSError, ImageProcessingError) as e:
            logger.error(f"Failed to store image {url}: {e}")
            return ImageResult(url=url, status=ImageStatus.SKIPPED, reason=str(e))
        finally:
            response.close()

        logger.info(f"Downloaded and processed image: {destination}")
        return ImageResult(
            url=url,
            status=ImageStatus.SUCCESS,
            path=destination,
            web_path=self.web_path_for(url),
        )

    def _store(
        self,
        response: requests.Response,
        url: str,
        destination: str,
        content_type: str,
    ) -> None:
        directory = os.path.dirname(destination)
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.part')
        try:
            with os.fdopen(fd, 'wb') as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
            self._process(tmp_path, url, destination, content_type)
        except Exception:
            if os.path.exists(destination):
                os.remove(destination)
            raise
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _process(self, source: str, url: str, destination: str, content_type: str) -> None:
        try:
            with Image.open(source) as original:
                image_format = original.format
                animated = getattr(original, 'is_animated', False)

                if content_type == 'image/jpeg':
                    image = ImageOps.exif_transpose(original)
                else:
                    image = original

                if self.width:
                    self._save_resized(image, destination)
                else:
                    self._save_stripped(image, destination, image_format, animated)
        except UnidentifiedImageError:
            # Formats Pillow cannot decode (SVG, ICO variants) carry no EXIF; keep as-is
            logger.debug(f"Pillow cannot decode {url}, storing original bytes")
            os.replace(source, destination)
        except (OSError, ValueError, KeyError, Image.DecompressionBombError) as e:
            # KeyError: Pillow reads the format but has no encoder for it
            raise ImageProcessingError(url, str(e)) from e

    def _save_resized(self, image: Image.Image, destination: str) -> None:
        height = max(1, round(image.height * self.width / image.width))
        resized = image.resize((self.width, height), Image.Resampling.LANCZOS)
        if resized.mode != 'RGB':
            resized = resized.convert('RGB')
        resized.save(destination, format='JPEG', quality=JPEG_QUALITY)

    def _save_stripped(
        self,
        image: Image.Image,
        destination: str,
        image_format: Optional[str],
        animated: bool,
    ) -> None:
        image.info = {k: v for k, v in image.info.items() if k in _KEPT_INFO_KEYS}
        if image_format == 'MPO':
            image_format, animated = 'JPEG', False

        options = {}
        if image_format == 'JPEG':
            options['quality'] = 'keep' if getattr(image, 'quantization', None) else JPEG_QUALITY
        elif image_format == 'PNG':
            options['pnginfo'] = PngInfo()
        if animated:
            options['save_all'] = True
        image.save(destination, format=image_format or 'PNG', **options)
