from typing import List

from pydantic import BaseModel


class Page(BaseModel):
    """A named wiki page as loaded from (or about to be written to) the store."""

    name: str
    body: bytes = b""
    page_list: List[str] = []
    """Names of every page in the store, filled in only when loading for display."""

    @property
    def text(self) -> str:
        """Body decoded for display; undecodable bytes are replaced."""
        return self.body.decode("utf-8", errors="replace")
