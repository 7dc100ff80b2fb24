"""Read METS description documents into schema structs."""

import base64
import binascii
import logging
from datetime import datetime
from pathlib import Path

from lxml import etree

from schemas.mets import (
    Div,
    FileEntry,
    FileGroup,
    FileLocation,
    FilePointer,
    MetadataReference,
    MetadataSection,
    MetadataWrap,
    MetsAgent,
    MetsDocument,
    MetsHeader,
    MetsPointer,
    StructMap,
)

from ..constants import METS_NS, XLINK_NS
from ..exceptions import MetsReadError

logger = logging.getLogger(__name__)

AMD_SECTION_KINDS = ("techMD", "rightsMD", "sourceMD", "digiprovMD")


def _tag(local: str) -> str:
    return f"{{{METS_NS}}}{local}"


def _href(element: etree._Element) -> str | None:
    return element.get(f"{{{XLINK_NS}}}href")


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an xs:dateTime value; returns None when it cannot be parsed."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparsable date value: {value!r}")
        return None


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _split_ids(value: str | None) -> list[str]:
    return value.split() if value else []


class METSReader:
    """Parse METS files with lxml.

    External entities and network access are disabled. When ``schema_path``
    is given, documents are also validated against that XSD.
    """

    def __init__(self, schema_path: Path | None = None):
        self.schema_path = schema_path
        self._schema: etree.XMLSchema | None = None

    @property
    def schema(self) -> etree.XMLSchema | None:
        """Lazy-loaded XSD used for validation."""
        if self._schema is None and self.schema_path is not None:
            self._schema = etree.XMLSchema(etree.parse(str(self.schema_path)))
        return self._schema

    def read(self, path: Path) -> MetsDocument:
        """Read a METS file.

        Args:
            path: Path to the METS document

        Returns:
            Parsed MetsDocument

        Raises:
            MetsReadError: If the file is not well-formed METS or fails
                schema validation
        """
        parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_blank_text=True,
        )
        try:
            tree = etree.parse(str(path), parser)
        except (etree.XMLSyntaxError, OSError) as e:
            raise MetsReadError(f"Cannot parse {path}: {e}") from e

        root = tree.getroot()
        if root.tag != _tag("mets"):
            raise MetsReadError(f"Root element of {path} is not mets:mets ({root.tag})")

        if self.schema is not None and not self.schema.validate(tree):
            errors = [str(error) for error in self.schema.error_log]
            raise MetsReadError(f"{path} is not valid against {self.schema_path}", errors)

        document = self._read_document(root)
        logger.debug(
            f"Read {path}: {len(document.metadata_sections)} metadata sections, "
            f"{len(document.struct_maps)} structural maps"
        )
        return document

    def _read_document(self, root: etree._Element) -> MetsDocument:
        header = root.find(_tag("metsHdr"))
        sections: list[MetadataSection] = []
        for element in root:
            if element.tag == _tag("dmdSec"):
                sections.append(self._read_section(element, "dmdSec"))
            elif element.tag == _tag("amdSec"):
                for child in element:
                    kind = etree.QName(child).localname
                    if kind in AMD_SECTION_KINDS:
                        sections.append(self._read_section(child, kind))

        file_groups: list[FileGroup] = []
        file_sec = root.find(_tag("fileSec"))
        if file_sec is not None:
            file_groups = [self._read_file_group(g) for g in file_sec.findall(_tag("fileGrp"))]

        return MetsDocument(
            objid=root.get("OBJID"),
            type=root.get("TYPE"),
            label=root.get("LABEL"),
            profile=root.get("PROFILE"),
            header=self._read_header(header) if header is not None else MetsHeader(),
            metadata_sections=sections,
            file_groups=file_groups,
            struct_maps=[self._read_struct_map(s) for s in root.findall(_tag("structMap"))],
        )

    def _read_header(self, element: etree._Element) -> MetsHeader:
        agents = []
        for agent in element.findall(_tag("agent")):
            name = agent.find(_tag("name"))
            agents.append(
                MetsAgent(
                    role=agent.get("ROLE", "CREATOR"),
                    other_role=agent.get("OTHERROLE"),
                    type=agent.get("TYPE"),
                    other_type=agent.get("OTHERTYPE"),
                    name=(name.text or "").strip() if name is not None else "",
                    notes=[(n.text or "").strip() for n in agent.findall(_tag("note"))],
                )
            )
        return MetsHeader(
            create_date=parse_datetime(element.get("CREATEDATE")),
            last_mod_date=parse_datetime(element.get("LASTMODDATE")),
            record_status=element.get("RECORDSTATUS"),
            agents=agents,
        )

    def _read_section(self, element: etree._Element, kind: str) -> MetadataSection:
        reference = None
        wrap = None
        md_ref = element.find(_tag("mdRef"))
        if md_ref is not None:
            reference = MetadataReference(
                id=md_ref.get("ID"),
                href=_href(md_ref) or "",
                loctype=md_ref.get("LOCTYPE", "URL"),
                mdtype=md_ref.get("MDTYPE"),
                other_mdtype=md_ref.get("OTHERMDTYPE"),
                mdtype_version=md_ref.get("MDTYPEVERSION"),
                mimetype=md_ref.get("MIMETYPE"),
                size=_parse_int(md_ref.get("SIZE")),
                created=parse_datetime(md_ref.get("CREATED")),
                checksum=md_ref.get("CHECKSUM"),
                checksum_type=md_ref.get("CHECKSUMTYPE"),
            )
        md_wrap = element.find(_tag("mdWrap"))
        if md_wrap is not None:
            wrap = self._read_wrap(md_wrap)

        return MetadataSection(
            id=element.get("ID", ""),
            kind=kind,
            created=parse_datetime(element.get("CREATED")),
            status=element.get("STATUS"),
            reference=reference,
            wrap=wrap,
        )

    def _read_wrap(self, element: etree._Element) -> MetadataWrap:
        xml_content = None
        binary_content = None
        xml_data = element.find(_tag("xmlData"))
        if xml_data is not None:
            children = [c for c in xml_data if isinstance(c.tag, str)]
            if children:
                xml_content = etree.tostring(
                    children[0], xml_declaration=True, encoding="UTF-8", pretty_print=True
                )
            elif xml_data.text and xml_data.text.strip():
                xml_content = xml_data.text.strip().encode("utf-8")
        bin_data = element.find(_tag("binData"))
        if bin_data is not None and bin_data.text:
            try:
                binary_content = base64.b64decode(bin_data.text.strip())
            except binascii.Error:
                logger.warning("Ignoring binData that is not valid base64")

        return MetadataWrap(
            mdtype=element.get("MDTYPE"),
            other_mdtype=element.get("OTHERMDTYPE"),
            mdtype_version=element.get("MDTYPEVERSION"),
            mimetype=element.get("MIMETYPE"),
            xml_content=xml_content,
            binary_content=binary_content,
        )

    def _read_file_group(self, element: etree._Element) -> FileGroup:
        files = []
        for file_element in element.findall(_tag("file")):
            files.append(
                FileEntry(
                    id=file_element.get("ID", ""),
                    mimetype=file_element.get("MIMETYPE"),
                    size=_parse_int(file_element.get("SIZE")),
                    created=parse_datetime(file_element.get("CREATED")),
                    checksum=file_element.get("CHECKSUM"),
                    checksum_type=file_element.get("CHECKSUMTYPE"),
                    locations=[
                        FileLocation(href=_href(loc) or "", loctype=loc.get("LOCTYPE", "URL"))
                        for loc in file_element.findall(_tag("FLocat"))
                    ],
                )
            )
        return FileGroup(
            id=element.get("ID"),
            use=element.get("USE"),
            files=files,
            groups=[self._read_file_group(g) for g in element.findall(_tag("fileGrp"))],
        )

    def _read_struct_map(self, element: etree._Element) -> StructMap:
        div = element.find(_tag("div"))
        return StructMap(
            id=element.get("ID"),
            type=element.get("TYPE"),
            label=element.get("LABEL"),
            div=self._read_div(div) if div is not None else None,
        )

    def _read_div(self, element: etree._Element) -> Div:
        return Div(
            id=element.get("ID"),
            label=element.get("LABEL"),
            type=element.get("TYPE"),
            order=_parse_int(element.get("ORDER")),
            dmd_ids=_split_ids(element.get("DMDID")),
            adm_ids=_split_ids(element.get("ADMID")),
            file_pointers=[
                FilePointer(file_id=f.get("FILEID", ""))
                for f in element.findall(_tag("fptr"))
            ],
            mets_pointers=[
                MetsPointer(href=_href(m) or "", loctype=m.get("LOCTYPE", "URL"))
                for m in element.findall(_tag("mptr"))
            ],
            divs=[self._read_div(d) for d in element.findall(_tag("div"))],
        )


def read_mets(path: Path, schema_path: Path | None = None) -> MetsDocument:
    """Read a METS document (see METSReader.read)."""
    return METSReader(schema_path).read(path)
