"""
Document model — metadata pulled out of a Markdown source.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

DEFAULT_TITLE = "Document"


class DocumentTitle(BaseModel):
    """Title and subtitle taken from the first level-1 heading."""

    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    subtitle: str = ""
