####################################
# --- Request/response schemas --- #
####################################

import builtins

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


class FileMetadata(BaseModel):
    """Metadata record persisted for every stored file."""
    name: str = Field(
        description="The original file name supplied by the uploader.",
        json_schema_extra={"example": "test.txt"},
    )
    mime: str = Field(
        description="The MIME type sniffed from the file content.",
        json_schema_extra={"example": "text/plain"},
    )
    owner: str = Field(
        description="Identifier of the uploading principal.",
        json_schema_extra={"example": "alice"},
    )
    key: str = Field(
        description="Opaque unique key assigned by the blob store.",
        json_schema_extra={"example": "635bdd289395ef004c776291"},
    )
    created_at: str = Field(
        alias="create_at",
        description="Creation time as an ISO-8601 UTC timestamp.",
        json_schema_extra={"example": "2024-01-01T00:00:00+00:00"},
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict:
        """Render the record the way it is stored in the metadata collection."""
        return self.model_dump(by_alias=True)


class FileInput(BaseModel):
    """Payload decoded from an upload request and consumed by ``BaseStore.put``."""
    name: str = ""
    owner: str = ""
    bytes: builtins.bytes = b""


class FileOutput(FileMetadata):
    """Metadata together with the file content."""
    bytes: builtins.bytes = b""


class PutFileResponse(BaseModel):
    """Response model for `POST /`."""
    id: str = Field(
        description="The key of the stored file.",
        json_schema_extra={"example": "635bdd289395ef004c776291"},
    )
