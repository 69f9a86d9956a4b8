"""Public links derived from a skin's md5 or archive item name."""
from typing import Optional
from urllib.parse import urlencode

from skin_moderation.config.settings import Settings, settings as default_settings


class SkinUrls:
    """Deterministic URL templates for public skin assets."""

    def __init__(self, settings: Settings = default_settings):
        self.bucket_url = settings.SKIN_BUCKET_URL.rstrip("/")
        self.webamp_origin = settings.WEBAMP_ORIGIN.rstrip("/")
        self.archive_origin = settings.ARCHIVE_ORIGIN.rstrip("/")

    def skin_url(self, md5: str) -> str:
        return f"{self.bucket_url}/skins/{md5}.wsz"

    def screenshot_url(self, md5: str) -> str:
        return f"{self.bucket_url}/screenshots/{md5}.png"

    def webamp_url(self, md5: str) -> str:
        return f"{self.webamp_origin}?{urlencode({'skinUrl': self.skin_url(md5)}, safe=':/')}"

    def archive_url(self, identifier: Optional[str]) -> Optional[str]:
        return None if identifier is None else f"{self.archive_origin}/details/{identifier}"
