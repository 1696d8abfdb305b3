"""
Profile image download and decoding, for display only.
"""

import asyncio
import io
from typing import Optional
import aiohttp
from loguru import logger
from PIL import Image, UnidentifiedImageError

from ..config import settings
from ..exceptions import ImageFetchError


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw image bytes.

    Args:
        data: Encoded image (PNG, JPEG, ...)

    Returns:
        Fully loaded Pillow image

    Raises:
        ImageFetchError: If the bytes are not a readable image
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageFetchError(f"Could not decode image: {e}") from e
    return image


class ImageFetcher:
    """Downloads profile pictures over HTTP."""

    def __init__(self, timeout: Optional[int] = None, max_bytes: Optional[int] = None):
        self.timeout = timeout or settings.image_fetch_timeout
        self.max_bytes = max_bytes or settings.image_max_bytes

    async def fetch(self, url: str) -> bytes:
        """
        Download an image.

        Args:
            url: HTTP(S) URL of the image

        Returns:
            Raw response body

        Raises:
            ImageFetchError: On a bad URL, HTTP error, timeout or oversized body
        """
        if not url.lower().startswith(("http://", "https://")):
            raise ImageFetchError(f"Unsupported image URL: {url}")

        logger.debug(f"Fetching profile image: {url}")
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        raise ImageFetchError(f"Image request failed with status {response.status}")
                    if response.content_length and response.content_length > self.max_bytes:
                        raise ImageFetchError(f"Image too large: {response.content_length} bytes")
                    data = await response.read()
        except aiohttp.ClientError as e:
            raise ImageFetchError(f"Image request failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise ImageFetchError(f"Image request timed out after {self.timeout}s") from e

        if len(data) > self.max_bytes:
            raise ImageFetchError(f"Image too large: {len(data)} bytes")
        return data

    async def load_image(self, url: str) -> Image.Image:
        """Download and decode an image."""
        data = await self.fetch(url)
        return decode_image(data)
