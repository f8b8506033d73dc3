"""Location descriptor supplied by the browsing layer."""

from urllib.parse import urlsplit

from pydantic import BaseModel, Field


def site_from_url(url: str | None) -> str | None:
    """Host component of a URL, or None when there is none."""
    if not url:
        return None
    try:
        return urlsplit(url).hostname or None
    except ValueError:
        return None


class PageLocation(BaseModel):
    """The tab and URL an agent is currently working in."""

    tab_id: int = Field(..., description="Browser tab identifier")
    url: str = Field(default="", description="Current page URL")

    @property
    def site(self) -> str | None:
        return site_from_url(self.url)
