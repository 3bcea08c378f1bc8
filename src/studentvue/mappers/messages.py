"""Message listing mapping for GetPXPMessages responses.

Response structure:
  PXPMessagesData
    MessageListings
      MessageListing @ID @Type @BeginDate @Subject @SubjectNoHTML @Content
                     @Read @Deletable @From @SMMsgPersonGU @Email @ModuleName
        AttachmentDatas
          AttachmentData @AttachmentName @SmAttachmentGU
"""

from studentvue.message import Message, MessageAttachment
from studentvue.models import StaffContact
from studentvue.utils import parse_date, to_bool
from studentvue.xmltree import XMLNode, attr, element, elements


def map_message(listing: XMLNode) -> Message:
    return Message(
        id=attr(listing, "ID"),
        type=attr(listing, "Type"),
        subject=attr(listing, "Subject"),
        subject_no_html=attr(listing, "SubjectNoHTML"),
        begin_date=parse_date(attr(listing, "BeginDate")),
        content=attr(listing, "Content"),
        sender=StaffContact(
            name=attr(listing, "From"),
            email=attr(listing, "Email"),
            staff_gu=attr(listing, "SMMsgPersonGU"),
        ),
        module_name=attr(listing, "ModuleName"),
        deletable=to_bool(attr(listing, "Deletable")),
        read=to_bool(attr(listing, "Read")),
        attachments=[
            MessageAttachment(
                name=attr(attachment, "AttachmentName"),
                attachment_gu=attr(attachment, "SmAttachmentGU"),
            )
            for attachment in elements(
                listing, "AttachmentDatas", "AttachmentData", required=False
            )
        ],
    )


def map_messages(tree: XMLNode) -> list[Message]:
    """Map a GetPXPMessages response into unbound Message objects.

    Raises:
        MissingElementError: If the PXPMessagesData root is absent.
    """
    root = element(tree, "PXPMessagesData")
    return [
        map_message(listing)
        for listing in elements(root, "MessageListings", "MessageListing", required=False)
    ]
