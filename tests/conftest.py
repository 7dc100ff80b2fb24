"""Pytest fixtures for infopack tests."""

import hashlib
import zipfile
from pathlib import Path

import pytest

from infopack.mets import write_mets
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
from schemas.package import (
    Agent,
    DescriptiveMetadata,
    IPFile,
    Package,
    PreservationMetadata,
    Representation,
)
from schemas.vocabulary import IPRole, MetadataCategory, MetadataType

STRUCT_MAP_LABEL = "Common Specification structural map"

DC_RECORD = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<oai_dc:dc xmlns:oai_dc="http://www.openarchives.org/OAI/2.0/oai_dc/" '
    b'xmlns:dc="http://purl.org/dc/elements/1.1/"><dc:title>Test</dc:title></oai_dc:dc>\n'
)
PREMIS_RECORD = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<premis:premis xmlns:premis="http://www.loc.gov/premis/v3" version="3.0"/>\n'
)


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def write_file(base: Path, relative: str, content: bytes) -> Path:
    """Write content at base/relative, creating folders."""
    path = base.joinpath(*relative.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def file_entry(base: Path, relative: str, file_id: str, mimetype: str = "text/plain") -> FileEntry:
    """fileSec entry for an existing file, with its real size and checksum."""
    content = base.joinpath(*relative.split("/")).read_bytes()
    return FileEntry(
        id=file_id,
        mimetype=mimetype,
        size=len(content),
        checksum=sha256(content),
        checksum_type="SHA-256",
        locations=[FileLocation(href=relative)],
    )


def md_ref_section(
    base: Path,
    relative: str,
    section_id: str,
    kind: str = "dmdSec",
    mdtype: str = "DC",
    other_mdtype: str | None = None,
) -> MetadataSection:
    """Metadata section referencing an existing file."""
    content = base.joinpath(*relative.split("/")).read_bytes()
    return MetadataSection(
        id=section_id,
        kind=kind,
        reference=MetadataReference(
            href=relative,
            mdtype=mdtype,
            other_mdtype=other_mdtype,
            mimetype="text/xml",
            size=len(content),
            checksum=sha256(content),
            checksum_type="SHA-256",
        ),
    )


def write_document(path: Path, document: MetsDocument) -> bytes:
    content = write_mets(document, schema_location=None)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return content


def zip_directory(source: Path, target: Path, top_folder: str | None = None) -> Path:
    """Zip a directory tree, optionally under a single top-level folder."""
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(source.rglob("*")):
            if path.is_file():
                name = path.relative_to(source).as_posix()
                archive.write(path, f"{top_folder}/{name}" if top_folder else name)
    return target


def _write_representation(
    rep_dir: Path,
    rep_id: str,
    data: dict[str, bytes],
    descriptive: bytes | None = None,
) -> None:
    for relative, content in data.items():
        write_file(rep_dir, f"data/{relative}", content)

    sections = []
    zone_divs = []
    if descriptive is not None:
        write_file(rep_dir, f"metadata/descriptive/{rep_id}-dc.xml", descriptive)
        sections.append(
            md_ref_section(rep_dir, f"metadata/descriptive/{rep_id}-dc.xml", f"DMD_{rep_id.upper()}")
        )
        zone_divs.append(
            Div(
                label="metadata",
                divs=[Div(label="descriptive", dmd_ids=[f"DMD_{rep_id.upper()}"])],
            )
        )

    data_group = FileGroup(
        id=f"GRP_DATA_{rep_id.upper()}",
        use="Data",
        files=[
            file_entry(rep_dir, f"data/{relative}", f"F_{rep_id.upper()}_{n}")
            for n, relative in enumerate(data, start=1)
        ],
    )
    zone_divs.append(
        Div(label="data", file_pointers=[FilePointer(file_id=data_group.id)])
    )

    write_document(
        rep_dir / "METS.xml",
        MetsDocument(
            objid=rep_id,
            type="representation:MIXED",
            header=MetsHeader(record_status="NEW"),
            metadata_sections=sections,
            file_groups=[data_group],
            struct_maps=[
                StructMap(
                    label=STRUCT_MAP_LABEL,
                    div=Div(label=rep_id, type="ORIGINAL", divs=zone_divs),
                )
            ],
        ),
    )


@pytest.fixture
def package_dir(tmp_path) -> Path:
    """Common-profile package directory with two representations.

    Structure::

        pkg-1/
          METS.xml                       (OBJID pkg-1, TYPE SIP:MIXED)
          metadata/descriptive/dc.xml    (OTHERMDTYPE "Dublin Core")
          metadata/preservation/premis.xml
          schemas/ead.xsd
          documentation/readme.txt
          representations/rep1/          (2 data files, descriptive metadata)
          representations/rep2/          (1 data file, no metadata)
    """
    root = tmp_path / "pkg-1"
    write_file(root, "metadata/descriptive/dc.xml", DC_RECORD)
    write_file(root, "metadata/preservation/premis.xml", PREMIS_RECORD)
    write_file(root, "schemas/ead.xsd", b"<xs:schema xmlns:xs='http://www.w3.org/2001/XMLSchema'/>")
    write_file(root, "documentation/readme.txt", b"Read me\n")

    _write_representation(
        root / "representations" / "rep1",
        "rep1",
        {"file1.txt": b"first file\n", "sub/file2.txt": b"second file\n"},
        descriptive=DC_RECORD,
    )
    _write_representation(
        root / "representations" / "rep2",
        "rep2",
        {"image.bin": bytes(range(256))},
    )

    rep_entries = [
        file_entry(root, f"representations/{rep}/METS.xml", f"F_{rep.upper()}_METS", "text/xml")
        for rep in ("rep1", "rep2")
    ]
    document = MetsDocument(
        objid="pkg-1",
        type="SIP:MIXED",
        label="Test package",
        header=MetsHeader(
            record_status="NEW",
            agents=[MetsAgent(role="CREATOR", type="ORGANIZATION", name="Test Archive")],
        ),
        metadata_sections=[
            md_ref_section(
                root, "metadata/descriptive/dc.xml", "DMD_PKG", mdtype="OTHER", other_mdtype="Dublin Core"
            ),
            md_ref_section(
                root, "metadata/preservation/premis.xml", "PREMIS_PKG", kind="digiprovMD", mdtype="PREMIS"
            ),
        ],
        file_groups=[
            FileGroup(
                id="GRP_ROOT",
                use="Common Specification root",
                groups=[
                    FileGroup(id="GRP_SCHEMAS", use="Schemas", files=[file_entry(root, "schemas/ead.xsd", "F_SCHEMA")]),
                    FileGroup(
                        id="GRP_DOCS",
                        use="Documentation",
                        files=[file_entry(root, "documentation/readme.txt", "F_DOC")],
                    ),
                    FileGroup(id="GRP_REPS", use="Representations", files=rep_entries),
                ],
            )
        ],
        struct_maps=[
            StructMap(
                label=STRUCT_MAP_LABEL,
                div=Div(
                    label="pkg-1",
                    divs=[
                        Div(
                            label="metadata",
                            divs=[
                                Div(label="descriptive", dmd_ids=["DMD_PKG"]),
                                Div(label="preservation", adm_ids=["PREMIS_PKG"]),
                            ],
                        ),
                        Div(label="schemas", file_pointers=[FilePointer(file_id="F_SCHEMA")]),
                        Div(label="documentation", file_pointers=[FilePointer(file_id="GRP_DOCS")]),
                        Div(
                            label="representations",
                            divs=[
                                Div(
                                    label=rep,
                                    mets_pointers=[MetsPointer(href=f"representations/{rep}/METS.xml")],
                                    file_pointers=[FilePointer(file_id=entry.id)],
                                )
                                for rep, entry in zip(("rep1", "rep2"), rep_entries)
                            ],
                        ),
                    ],
                ),
            )
        ],
    )
    write_document(root / "METS.xml", document)
    return root


@pytest.fixture
def legacy_package_dir(tmp_path) -> Path:
    """Legacy (iArxiu) package with inline metadata and one document.

    The main div carries three expedient-level sections: one recognized
    expedient, one with an unrecognized type (classified by default) and one
    with no type at all (unclassified). The ``doc1`` div carries a Dublin
    Core document section and points at ``doc1/contract.pdf``.
    """
    root = tmp_path / "exp-1"
    write_file(root, "doc1/contract.pdf", b"%PDF-1.4 test\n")

    def wrap(mdtype, other_mdtype, xml):
        return MetadataWrap(mdtype=mdtype, other_mdtype=other_mdtype, mimetype="text/xml", xml_content=xml)

    document = MetsDocument(
        objid="exp-1",
        type="urn:iarxiu:2.0:templates:catcert:PL_EXPEDIENT",
        header=MetsHeader(record_status="NEW"),
        metadata_sections=[
            MetadataSection(
                id="DMD_EXP",
                wrap=wrap("OTHER", "Voc_expedient", b'<exp:expedient xmlns:exp="urn:test:exp"><exp:title>Case</exp:title></exp:expedient>'),
            ),
            MetadataSection(
                id="DMD_LOCAL",
                wrap=wrap("OTHER", "local-schema", b'<local xmlns="urn:test:local"/>'),
            ),
            MetadataSection(
                id="DMD_UNK",
                wrap=wrap(None, None, b'<unknown xmlns="urn:test:unknown"/>'),
            ),
            MetadataSection(
                id="DMD_DOC1",
                wrap=wrap("DC", None, b'<dc xmlns="http://purl.org/dc/elements/1.1/"><title>Contract</title></dc>'),
            ),
        ],
        file_groups=[
            FileGroup(id="GRP_FILES", files=[file_entry(root, "doc1/contract.pdf", "FILE_DOC1", "application/pdf")])
        ],
        struct_maps=[
            StructMap(
                id="physical",
                type="physical",
                div=Div(
                    label="expedient",
                    dmd_ids=["DMD_EXP", "DMD_LOCAL", "DMD_UNK"],
                    divs=[
                        Div(
                            label="doc1",
                            dmd_ids=["DMD_DOC1"],
                            file_pointers=[FilePointer(file_id="FILE_DOC1")],
                        )
                    ],
                ),
            )
        ],
    )
    write_document(root / "METS.xml", document)
    return root


@pytest.fixture
def source_files(tmp_path) -> dict[str, Path]:
    """Loose files used to assemble packages in memory."""
    base = tmp_path / "sources"
    return {
        "dc": write_file(base, "dc.xml", DC_RECORD),
        "premis": write_file(base, "premis.xml", PREMIS_RECORD),
        "a": write_file(base, "a.txt", b"alpha\n"),
        "b": write_file(base, "b.txt", b"bravo\n"),
        "c": write_file(base, "c.csv", b"x,y\n1,2\n"),
        "schema": write_file(base, "schema.xsd", b"<schema/>"),
    }


@pytest.fixture
def sample_package(source_files) -> Package:
    """In-memory SIP with two representations backed by files on disk."""
    return Package(
        ids=["pkg-build", "alt-id"],
        description="Built package",
        agents=[Agent(name="Test Archive")],
        descriptive_metadata=[
            DescriptiveMetadata(
                id="DMD_1",
                file=IPFile(path=source_files["dc"]),
                metadata_type=MetadataType(category=MetadataCategory.DC),
                metadata_version="1.1",
            )
        ],
        preservation_metadata=[
            PreservationMetadata(id="PREMIS_1", file=IPFile(path=source_files["premis"]))
        ],
        representations=[
            Representation(
                representation_id="rep1",
                descriptive_metadata=[
                    DescriptiveMetadata(id="DMD_REP1", file=IPFile(path=source_files["dc"]))
                ],
                data=[
                    IPFile(path=source_files["a"]),
                    IPFile(path=source_files["b"]).in_folders("nested", "deeper"),
                ],
            ),
            Representation(
                representation_id="rep2",
                data=[IPFile(path=source_files["c"]).renamed("table.csv")],
            ),
        ],
        schemas=[IPFile(path=source_files["schema"])],
    )


@pytest.fixture
def aip_package(sample_package, source_files) -> Package:
    sample_package.role = IPRole.AIP
    sample_package.add_submission(IPFile(path=source_files["a"]).renamed("original.txt"))
    return sample_package
