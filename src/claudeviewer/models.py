"""Data models for exported conversations."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _ExportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Attachment(_ExportModel):
    file_name: str = ""
    file_size: int | None = None
    file_type: str | None = None
    extracted_content: str | None = None

    @field_validator("file_name", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def has_content(self) -> bool:
        return bool(self.extracted_content and self.extracted_content.strip())


class FileRef(_ExportModel):
    file_name: str = ""


class Message(_ExportModel):
    id: str = Field(default="", alias="uuid")
    text: str = ""
    sender: Literal["human", "assistant"]
    created_at: str | None = None
    updated_at: str | None = None
    attachments: list[Attachment] = []
    files: list[FileRef] = []

    @field_validator("id", "text", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("attachments", "files", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v

    @property
    def is_contentful(self) -> bool:
        """Non-blank text, or at least one attachment with non-blank extracted content."""
        return bool(self.text.strip()) or any(a.has_content for a in self.attachments)


class Conversation(_ExportModel):
    id: str = Field(alias="uuid")
    name: str = ""
    created_at: str | None = None
    updated_at: str | None = None
    messages: list[Message] = Field(default=[], alias="chat_messages")

    @field_validator("name", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("messages", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v

    @property
    def message_count(self) -> int:
        return len(self.messages)

    @property
    def has_content(self) -> bool:
        return any(m.is_contentful for m in self.messages)
