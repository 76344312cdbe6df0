"""Content store value objects."""

from pydantic import BaseModel, Field, StrictStr


class StoreEntry(BaseModel):
    """One entry of a store directory listing."""

    name: StrictStr = Field(..., description="Entry name, e.g. 1700000000000-ab12cd34.json")
    path: StrictStr = Field(..., description="Store-relative path")
    entry_type: StrictStr = Field("file", description="'file' or 'dir'")
    download_url: StrictStr | None = Field(None, description="Direct retrieval URL, if any")


class StoredFile(BaseModel):
    """File content read back from the store."""

    path: StrictStr
    content: bytes = Field(..., repr=False)
    content_type: StrictStr | None = None
