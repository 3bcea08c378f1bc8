"""Student info mapping for StudentInfo responses.

The district renders the mailing address with an unclosed ``<br>``, so
depending on the server most contact fields end up nested inside the
Address element rather than beside it. Fields are read from Address first
and from the StudentInfo element otherwise.
"""

from studentvue.models import (
    AdditionalInfo,
    AdditionalInfoItem,
    ContactPhones,
    Dentist,
    EmergencyContact,
    ItemSource,
    Physician,
    StaffContact,
    StudentInfo,
    StudentName,
)
from studentvue.xmltree import (
    TEXT_KEY,
    Presence,
    XMLNode,
    attr,
    element,
    elements,
    first,
    presence,
    text,
)


def _scope(info: XMLNode, address: XMLNode, key: str) -> XMLNode:
    """Pick whichever of Address / StudentInfo carries ``key``."""
    return address if presence(address, key) is not Presence.ABSENT else info


def _address_text(address: XMLNode) -> str | None:
    value = first(address, TEXT_KEY)
    if value is None:
        value = text(address, "br")
    return value


def _emergency_contact(contact: XMLNode) -> EmergencyContact:
    return EmergencyContact(
        name=attr(contact, "Name"),
        phone=ContactPhones(
            home=attr(contact, "HomePhone"),
            mobile=attr(contact, "MobilePhone"),
            other=attr(contact, "OtherPhone"),
            work=attr(contact, "WorkPhone"),
        ),
        relationship=attr(contact, "Relationship"),
    )


def _additional_info(box: XMLNode) -> AdditionalInfo:
    return AdditionalInfo(
        id=attr(box, "GroupBoxID"),
        type=attr(box, "GroupBoxLabel"),
        vc_id=attr(box, "VCID"),
        items=[
            AdditionalInfoItem(
                source=ItemSource(
                    element=attr(item, "SourceElement"),
                    object=attr(item, "SourceObject"),
                ),
                vc_id=attr(item, "VCID"),
                value=attr(item, "Value"),
                type=attr(item, "ItemType"),
            )
            for item in elements(box, "UserDefinedItems", "UserDefinedItem", required=False)
        ],
    )


def map_student_info(tree: XMLNode) -> StudentInfo:
    """Map a StudentInfo response into a StudentInfo record.

    Raises:
        MissingElementError: If the StudentInfo root is absent.
    """
    info = element(tree, "StudentInfo")
    address = element(info, "Address", required=False) or {}

    def field(key: str) -> str | None:
        return text(_scope(info, address, key), key)

    dentist = element(_scope(info, address, "Dentist"), "Dentist", required=False) or {}
    physician = element(_scope(info, address, "Physician"), "Physician", required=False) or {}

    return StudentInfo(
        student=StudentName(
            name=field("FormattedName"),
            last_name=field("LastNameGoesBy"),
            nickname=field("NickName"),
        ),
        birth_date=field("BirthDate"),
        track=field("Track"),
        address=_address_text(address),
        counselor=StaffContact(
            name=field("CounselorName"),
            email=field("CounselorEmail"),
            staff_gu=field("CounselorStaffGU"),
        ),
        current_school=field("CurrentSchool"),
        dentist=Dentist(
            name=attr(dentist, "Name"),
            phone=attr(dentist, "Phone"),
            extn=attr(dentist, "Extn"),
            office=attr(dentist, "Office"),
        ),
        physician=Physician(
            name=attr(physician, "Name"),
            phone=attr(physician, "Phone"),
            extn=attr(physician, "Extn"),
            hospital=attr(physician, "Hospital"),
        ),
        email=field("EMail"),
        emergency_contacts=[
            _emergency_contact(contact)
            for contact in elements(
                _scope(info, address, "EmergencyContacts"),
                "EmergencyContacts",
                "EmergencyContact",
                required=False,
            )
        ],
        gender=field("Gender"),
        grade=field("Grade"),
        locker_info_records=field("LockerInfoRecords"),
        home_language=field("HomeLanguage"),
        home_room=field("HomeRoom"),
        home_room_teacher=StaffContact(
            email=field("HomeRoomTchEMail"),
            name=field("HomeRoomTch"),
            staff_gu=field("HomeRoomTchStaffGU"),
        ),
        additional_info=[
            _additional_info(box)
            for box in elements(
                _scope(info, address, "UserDefinedGroupBoxes"),
                "UserDefinedGroupBoxes",
                "UserDefinedGroupBox",
                required=False,
            )
        ],
    )
