"""Stock photo search by keyword, the last image source for chat suggestions."""

import asyncio
from urllib.parse import quote

import aiohttp

from src.utils.config import Config
from src.utils.errors import ImageSearchFailed
from src.utils.logger import logger


class StockPhotoSearch:
    """Resolve a keyword to a stock photo URL.

    The configured URL template contains a {query} placeholder. Services of
    this kind answer with a redirect to a concrete image, so the final URL after
    redirects is what gets stored on the recipe.
    """

    def __init__(self, config: Config) -> None:
        self.url_template = config.STOCK_PHOTO_URL
        self.timeout = config.STOCK_PHOTO_TIMEOUT

    def build_url(self, keyword: str) -> str:
        query = quote(keyword.strip().lower(), safe="")
        return self.url_template.replace("{query}", query)

    async def search(self, keyword: str) -> str:
        """Return a resolvable image URL for the keyword.

        Raises:
            ImageSearchFailed: On empty keyword, transport error, non-200 status
                or a response that is not an image.
        """
        if not keyword or not keyword.strip():
            raise ImageSearchFailed("No keyword to search a stock photo for")

        url = self.build_url(keyword)
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    allow_redirects=True,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    if response.status != 200:
                        raise ImageSearchFailed(f"Stock photo search returned HTTP {response.status}")
                    if not response.content_type.startswith("image/"):
                        raise ImageSearchFailed(
                            f"Stock photo search returned {response.content_type}, not an image"
                        )
                    final_url = str(response.url)
        except ImageSearchFailed:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ImageSearchFailed(f"Stock photo search failed: {e}") from e

        logger.debug(f"Stock photo for '{keyword}': {final_url}")
        return final_url


__all__ = ["StockPhotoSearch"]
