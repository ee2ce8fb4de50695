"""Project manifest (``package.json``) view.

Only the fields the tracker records are declared; everything else is kept
as extra data and is never written back from this model.  Writes go through
the text-patch engine so the user's formatting survives.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ManifestInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    version: str
    description: str | None = None
