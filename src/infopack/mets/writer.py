"""Serialize schema structs into METS XML."""

import base64
import logging
from datetime import datetime

from lxml import etree

from schemas.mets import (
    Div,
    FileEntry,
    FileGroup,
    MetadataReference,
    MetadataSection,
    MetadataWrap,
    MetsDocument,
    MetsHeader,
    StructMap,
)

from ..constants import METS_NS, XLINK_NS, XSI_NS

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_LOCATION = (
    f"{METS_NS} schemas/IP.xsd {XLINK_NS} schemas/xlink.xsd"
)
REPRESENTATION_SCHEMA_LOCATION = (
    f"{METS_NS} ../../schemas/IP.xsd {XLINK_NS} ../../schemas/xlink.xsd"
)


def format_datetime(value: datetime) -> str:
    return value.isoformat()


def _tag(local: str) -> str:
    return f"{{{METS_NS}}}{local}"


def _set(element: etree._Element, name: str, value) -> None:
    """Set an attribute, skipping None and empty values."""
    if value is None or value == "":
        return
    if isinstance(value, datetime):
        value = format_datetime(value)
    element.set(name, str(value))


class METSWriter:
    """Build METS XML from a MetsDocument.

    The writer emits sections in schema order: metsHdr, dmdSec, amdSec,
    fileSec, structMap.
    """

    def __init__(self, schema_location: str | None = DEFAULT_SCHEMA_LOCATION):
        self.schema_location = schema_location

    def write(self, document: MetsDocument) -> bytes:
        """Serialize a document to UTF-8 bytes with an XML declaration."""
        root = self.build(document)
        return etree.tostring(
            root,
            xml_declaration=True,
            encoding="UTF-8",
            pretty_print=True,
        )

    def build(self, document: MetsDocument) -> etree._Element:
        """Build the mets root element."""
        nsmap = {
            None: METS_NS,
            "xlink": XLINK_NS,
            "xsi": XSI_NS,
        }
        root = etree.Element(_tag("mets"), nsmap=nsmap)
        if self.schema_location:
            root.set(f"{{{XSI_NS}}}schemaLocation", self.schema_location)
        _set(root, "OBJID", document.objid)
        _set(root, "TYPE", document.type)
        _set(root, "LABEL", document.label)
        _set(root, "PROFILE", document.profile)

        root.append(self._build_header(document.header))

        for section in document.metadata_sections:
            if section.kind == "dmdSec":
                root.append(self._build_section(section))

        amd_sections = [s for s in document.metadata_sections if s.kind != "dmdSec"]
        if amd_sections:
            amd_sec = etree.SubElement(root, _tag("amdSec"))
            for section in amd_sections:
                amd_sec.append(self._build_section(section))

        if document.file_groups:
            file_sec = etree.SubElement(root, _tag("fileSec"))
            for group in document.file_groups:
                file_sec.append(self._build_file_group(group))

        for struct_map in document.struct_maps:
            root.append(self._build_struct_map(struct_map))

        return root

    def _build_header(self, header: MetsHeader) -> etree._Element:
        """Build the metsHdr element."""
        hdr = etree.Element(_tag("metsHdr"))
        _set(hdr, "CREATEDATE", header.create_date)
        _set(hdr, "LASTMODDATE", header.last_mod_date)
        _set(hdr, "RECORDSTATUS", header.record_status)

        for agent in header.agents:
            agent_el = etree.SubElement(hdr, _tag("agent"))
            _set(agent_el, "ROLE", agent.role)
            _set(agent_el, "OTHERROLE", agent.other_role)
            _set(agent_el, "TYPE", agent.type)
            _set(agent_el, "OTHERTYPE", agent.other_type)
            name = etree.SubElement(agent_el, _tag("name"))
            name.text = agent.name
            for note in agent.notes:
                note_el = etree.SubElement(agent_el, _tag("note"))
                note_el.text = note
        return hdr

    def _build_section(self, section: MetadataSection) -> etree._Element:
        """Build a dmdSec or amdSec child with its mdRef or mdWrap."""
        element = etree.Element(_tag(section.kind))
        _set(element, "ID", section.id)
        _set(element, "CREATED", section.created)
        _set(element, "STATUS", section.status)
        if section.reference is not None:
            element.append(self._build_md_ref(section.reference))
        elif section.wrap is not None:
            element.append(self._build_md_wrap(section.wrap))
        return element

    def _build_md_ref(self, reference: MetadataReference) -> etree._Element:
        md_ref = etree.Element(_tag("mdRef"))
        _set(md_ref, "ID", reference.id)
        _set(md_ref, "LOCTYPE", reference.loctype)
        md_ref.set(f"{{{XLINK_NS}}}type", "simple")
        md_ref.set(f"{{{XLINK_NS}}}href", reference.href)
        _set(md_ref, "MDTYPE", reference.mdtype)
        _set(md_ref, "OTHERMDTYPE", reference.other_mdtype)
        _set(md_ref, "MDTYPEVERSION", reference.mdtype_version)
        _set(md_ref, "MIMETYPE", reference.mimetype)
        _set(md_ref, "SIZE", reference.size)
        _set(md_ref, "CREATED", reference.created)
        _set(md_ref, "CHECKSUM", reference.checksum)
        _set(md_ref, "CHECKSUMTYPE", reference.checksum_type)
        return md_ref

    def _build_md_wrap(self, wrap: MetadataWrap) -> etree._Element:
        md_wrap = etree.Element(_tag("mdWrap"))
        _set(md_wrap, "MDTYPE", wrap.mdtype)
        _set(md_wrap, "OTHERMDTYPE", wrap.other_mdtype)
        _set(md_wrap, "MDTYPEVERSION", wrap.mdtype_version)
        _set(md_wrap, "MIMETYPE", wrap.mimetype)
        if wrap.xml_content is not None:
            xml_data = etree.SubElement(md_wrap, _tag("xmlData"))
            xml_data.append(etree.fromstring(wrap.xml_content))
        elif wrap.binary_content is not None:
            bin_data = etree.SubElement(md_wrap, _tag("binData"))
            bin_data.text = base64.b64encode(wrap.binary_content).decode("ascii")
        return md_wrap

    def _build_file_group(self, group: FileGroup) -> etree._Element:
        grp = etree.Element(_tag("fileGrp"))
        _set(grp, "ID", group.id)
        _set(grp, "USE", group.use)
        for entry in group.files:
            grp.append(self._build_file(entry))
        for child in group.groups:
            grp.append(self._build_file_group(child))
        return grp

    def _build_file(self, entry: FileEntry) -> etree._Element:
        file_el = etree.Element(_tag("file"))
        _set(file_el, "ID", entry.id)
        _set(file_el, "MIMETYPE", entry.mimetype)
        _set(file_el, "SIZE", entry.size)
        _set(file_el, "CREATED", entry.created)
        _set(file_el, "CHECKSUM", entry.checksum)
        _set(file_el, "CHECKSUMTYPE", entry.checksum_type)
        for location in entry.locations:
            flocat = etree.SubElement(file_el, _tag("FLocat"))
            _set(flocat, "LOCTYPE", location.loctype)
            flocat.set(f"{{{XLINK_NS}}}type", "simple")
            flocat.set(f"{{{XLINK_NS}}}href", location.href)
        return file_el

    def _build_struct_map(self, struct_map: StructMap) -> etree._Element:
        element = etree.Element(_tag("structMap"))
        _set(element, "ID", struct_map.id)
        _set(element, "TYPE", struct_map.type)
        _set(element, "LABEL", struct_map.label)
        if struct_map.div is not None:
            element.append(self._build_div(struct_map.div))
        return element

    def _build_div(self, div: Div) -> etree._Element:
        element = etree.Element(_tag("div"))
        _set(element, "ID", div.id)
        _set(element, "LABEL", div.label)
        _set(element, "TYPE", div.type)
        _set(element, "ORDER", div.order)
        _set(element, "DMDID", " ".join(div.dmd_ids))
        _set(element, "ADMID", " ".join(div.adm_ids))
        for pointer in div.mets_pointers:
            mptr = etree.SubElement(element, _tag("mptr"))
            _set(mptr, "LOCTYPE", pointer.loctype)
            mptr.set(f"{{{XLINK_NS}}}type", "simple")
            mptr.set(f"{{{XLINK_NS}}}href", pointer.href)
        for pointer in div.file_pointers:
            fptr = etree.SubElement(element, _tag("fptr"))
            fptr.set("FILEID", pointer.file_id)
        for child in div.divs:
            element.append(self._build_div(child))
        return element


def write_mets(document: MetsDocument, schema_location: str | None = DEFAULT_SCHEMA_LOCATION) -> bytes:
    """Serialize a METS document (see METSWriter.write)."""
    return METSWriter(schema_location).write(document)
