"""Inbox messages from GetPXPMessages.

Unlike the other records a Message stays bound to the session it was
fetched with, because marking it read is a server-side update.
"""

from datetime import datetime

from pydantic import BaseModel, Field, PrivateAttr

from studentvue.logging import get_logger
from studentvue.models import Snapshot, StaffContact
from studentvue.soap import RequestProcessor

log = get_logger(__name__)


class MessageAttachment(Snapshot):
    name: str | None = None
    attachment_gu: str | None = None


class Message(BaseModel):
    """A message listing. ``content`` is the raw HTML body."""

    id: str | None = None
    type: str | None = None
    subject: str | None = None
    subject_no_html: str | None = None
    begin_date: datetime | None = None
    content: str | None = None
    sender: StaffContact
    module_name: str | None = None
    deletable: bool = False
    read: bool = False
    attachments: list[MessageAttachment] = Field(default_factory=list)

    _processor: RequestProcessor | None = PrivateAttr(default=None)

    def bind(self, processor: RequestProcessor) -> "Message":
        """Attach the session used for server-side updates."""
        self._processor = processor
        return self

    def is_read(self) -> bool:
        return self.read

    async def mark_as_read(self) -> None:
        """Mark the message read on the server, then locally.

        Does nothing when the message is already read.

        Raises:
            RuntimeError: If the message is not bound to a session.
        """
        if self.read:
            return
        if self._processor is None:
            raise RuntimeError("Message is not bound to a session")
        await self._processor.process_request(
            "UpdatePXPMessage",
            {
                "childIntID": 0,
                "MessageListing": {"ID": self.id or "", "Type": self.type or "", "MarkAsRead": "true"},
            },
        )
        self.read = True
        log.info("message_marked_read", message_id=self.id)
