"""Tests for file and metadata resolution."""

import pytest

from infopack.config import Settings
from infopack.context import ParseContext
from infopack.mets import read_mets
from infopack.profiles import Zone
from infopack.resolvers import FileResolver, MetadataResolver
from infopack.resolvers.files import (
    FileTarget,
    GroupTarget,
    MetadataTarget,
    Unresolved,
    collect_pointers,
    expand_pointer,
)
from infopack.resolvers.metadata import extension_for
from schemas import codes
from schemas.mets import Div, FilePointer, MetadataSection, MetadataWrap
from schemas.package import DescriptiveMetadata, PreservationMetadata
from schemas.report import ValidationLevel
from schemas.vocabulary import MetadataCategory

from conftest import write_file


@pytest.fixture
def context(tmp_path):
    return ParseContext(settings=Settings(), work_dir=tmp_path / "work")


@pytest.fixture
def resolvers(context, package_dir):
    file_resolver = FileResolver(context, package_root=package_dir)
    return file_resolver, MetadataResolver(context, file_resolver)


@pytest.fixture
def main_document(package_dir):
    return read_mets(package_dir / "METS.xml")


# --- Pointer expansion ---


class TestExpandPointer:
    """Tests for expand_pointer()."""

    def test_targets(self, main_document):
        index = main_document.index()

        assert isinstance(expand_pointer(FilePointer(file_id="F_SCHEMA"), index), FileTarget)
        assert isinstance(expand_pointer(FilePointer(file_id="GRP_DOCS"), index), GroupTarget)
        assert isinstance(expand_pointer(FilePointer(file_id="DMD_PKG"), index), MetadataTarget)
        assert expand_pointer(FilePointer(file_id="NOPE"), index) == Unresolved("NOPE")

    def test_collect_pointers_depth_first(self):
        div = Div(
            file_pointers=[FilePointer(file_id="A")],
            divs=[Div(file_pointers=[FilePointer(file_id="B")], divs=[Div(file_pointers=[FilePointer(file_id="C")])])],
        )

        assert [p.file_id for p in collect_pointers(div)] == ["A", "B", "C"]


# --- Files ---


class TestFileResolver:
    """Tests for FileResolver."""

    def test_resolve_zone_with_group(self, resolvers, main_document, package_dir, context):
        """A pointer at a file group yields all files of the group."""
        file_resolver, _ = resolvers
        div = Div(label="documentation", file_pointers=[FilePointer(file_id="GRP_DOCS")])

        files = file_resolver.resolve_zone(
            div, main_document.index(), package_dir, Zone.DOCUMENTATION, package_dir / "documentation"
        )

        assert [f.file_name for f in files] == ["readme.txt"]
        assert files[0].checksum_algorithm == "SHA-256"
        assert context.report.has(codes.DOCUMENTATION_FILE_FOUND_WITH_MATCHING_CHECKSUMS)

    def test_missing_file(self, resolvers, main_document, package_dir, context):
        file_resolver, _ = resolvers
        (package_dir / "schemas" / "ead.xsd").unlink()
        div = Div(label="schemas", file_pointers=[FilePointer(file_id="F_SCHEMA")])

        files = file_resolver.resolve_zone(
            div, main_document.index(), package_dir, Zone.SCHEMAS, package_dir / "schemas"
        )

        assert files == []
        assert context.report.has(codes.SCHEMA_FILE_NOT_FOUND, ValidationLevel.ERROR)
        assert context.report.errors()[0].path == "schemas/ead.xsd"

    def test_checksum_mismatch(self, resolvers, main_document, package_dir, context):
        file_resolver, _ = resolvers
        (package_dir / "schemas" / "ead.xsd").write_bytes(b"tampered")
        div = Div(label="schemas", file_pointers=[FilePointer(file_id="F_SCHEMA")])

        files = file_resolver.resolve_zone(
            div, main_document.index(), package_dir, Zone.SCHEMAS, package_dir / "schemas"
        )

        assert files == []
        assert context.report.has(codes.FILE_CHECKSUM_MISMATCH, ValidationLevel.ERROR)

    def test_unsafe_href(self, resolvers, package_dir, context):
        """Hrefs escaping the package are rejected without touching the disk."""
        file_resolver, _ = resolvers

        result = file_resolver.resolve(package_dir, "../outside.txt", Zone.DATA, package_dir)

        assert result is None
        assert context.report.has(codes.REPRESENTATION_FILE_NOT_FOUND, ValidationLevel.ERROR)

    def test_unknown_algorithm(self, resolvers, package_dir, context):
        file_resolver, _ = resolvers

        result = file_resolver.resolve(
            package_dir, "schemas/ead.xsd", Zone.SCHEMAS, package_dir, checksum="00", checksum_type="CRC32"
        )

        assert result is None
        assert context.report.has(codes.FILE_CHECKSUM_ALGORITHM_UNKNOWN)

    def test_relative_folders(self, resolvers, package_dir):
        file_resolver, _ = resolvers
        rep = package_dir / "representations" / "rep1"

        result = file_resolver.resolve(rep, "data/sub/file2.txt", Zone.DATA, rep / "data")

        assert result.relative_folders == ["sub"]
        assert result.relative_path == "sub/file2.txt"

    def test_unresolved_and_metadata_pointers(self, resolvers, main_document, package_dir, context):
        file_resolver, _ = resolvers
        div = Div(label="schemas", file_pointers=[FilePointer(file_id="NOPE"), FilePointer(file_id="DMD_PKG")])

        files = file_resolver.resolve_zone(div, main_document.index(), package_dir, Zone.SCHEMAS, package_dir)

        assert files == []
        assert context.report.has(codes.FILE_POINTER_UNRESOLVED)
        assert context.report.has(codes.FILE_POINTER_NOT_A_FILE)


# --- Metadata ---


class TestMetadataResolver:
    """Tests for MetadataResolver."""

    def test_descriptive_zone(self, resolvers, main_document, package_dir, context):
        """DMDID links resolve to descriptive records with the aliased type."""
        _, metadata_resolver = resolvers
        div = Div(label="descriptive", dmd_ids=["DMD_PKG"])

        records = metadata_resolver.resolve_zone(
            div, main_document.index(), package_dir, Zone.DESCRIPTIVE, package_dir / "metadata" / "descriptive"
        )

        assert len(records) == 1
        assert isinstance(records[0], DescriptiveMetadata)
        assert records[0].metadata_type.category is MetadataCategory.DC
        assert context.report.is_valid()

    def test_preservation_zone(self, resolvers, main_document, package_dir):
        _, metadata_resolver = resolvers
        div = Div(label="preservation", adm_ids=["PREMIS_PKG"])

        records = metadata_resolver.resolve_zone(
            div, main_document.index(), package_dir, Zone.PRESERVATION, package_dir / "metadata" / "preservation"
        )

        assert isinstance(records[0], PreservationMetadata)
        assert records[0].metadata_type.category is MetadataCategory.PREMIS

    def test_section_resolved_once(self, resolvers, main_document, package_dir):
        """A section reached by both fptr and DMDID gives one record."""
        _, metadata_resolver = resolvers
        div = Div(label="descriptive", dmd_ids=["DMD_PKG"], file_pointers=[FilePointer(file_id="DMD_PKG")])

        records = metadata_resolver.resolve_zone(
            div, main_document.index(), package_dir, Zone.DESCRIPTIVE, package_dir
        )

        assert len(records) == 1

    def test_empty_zone_warns(self, resolvers, main_document, package_dir, context):
        _, metadata_resolver = resolvers

        records = metadata_resolver.resolve_zone(
            Div(label="other"), main_document.index(), package_dir, Zone.OTHER, package_dir
        )

        assert records == []
        assert context.report.has(codes.METADATA_ZONE_EMPTY, ValidationLevel.WARN)

    def test_unresolved_dmd_id(self, resolvers, main_document, package_dir, context):
        _, metadata_resolver = resolvers

        metadata_resolver.resolve_zone(
            Div(label="descriptive", dmd_ids=["MISSING"]), main_document.index(), package_dir, Zone.DESCRIPTIVE, package_dir
        )

        assert context.report.has(codes.METADATA_REFERENCE_UNRESOLVED, ValidationLevel.ERROR)

    def test_unknown_descriptive_type_warns(self, resolvers, package_dir, context):
        _, metadata_resolver = resolvers
        write_file(package_dir, "metadata/descriptive/custom.xml", b"<custom/>")
        section = MetadataSection(
            id="DMD_CUSTOM",
            reference={"href": "metadata/descriptive/custom.xml", "mdtype": "OTHER", "other_mdtype": "custom"},
        )

        record = metadata_resolver.resolve_section(section, package_dir, Zone.DESCRIPTIVE, package_dir)

        assert record.metadata_type.as_canonical_string() == "custom"
        assert context.report.has(codes.UNKNOWN_DESCRIPTIVE_METADATA_TYPE, ValidationLevel.WARN)

    def test_externalize_inline_section(self, resolvers, context, tmp_path):
        """mdWrap content is written to the work directory and resolved from there."""
        _, metadata_resolver = resolvers
        section = MetadataSection(
            id="DMD:INLINE",
            wrap=MetadataWrap(mdtype="DC", mimetype="text/xml", xml_content=b"<dc/>"),
        )

        record = metadata_resolver.resolve_section(section, tmp_path, Zone.DESCRIPTIVE, tmp_path)

        expected = tmp_path / "work" / "metadata" / "descriptive" / "DMD_INLINE.xml"
        assert record.file.path == expected
        assert expected.read_bytes() == b"<dc/>"
        assert context.report.has(codes.METADATA_SECTION_EXTERNALIZED)

    def test_empty_inline_section(self, resolvers, context, tmp_path):
        _, metadata_resolver = resolvers
        section = MetadataSection(id="DMD_EMPTY", wrap=MetadataWrap(mdtype="DC"))

        assert metadata_resolver.resolve_section(section, tmp_path, Zone.DESCRIPTIVE, tmp_path) is None
        assert context.report.has(codes.METADATA_SECTION_HAS_NO_CONTENT, ValidationLevel.ERROR)

    def test_section_without_reference(self, resolvers, context, tmp_path):
        _, metadata_resolver = resolvers

        result = metadata_resolver.resolve_section(MetadataSection(id="EMPTY"), tmp_path, Zone.DESCRIPTIVE, tmp_path)

        assert result is None
        assert context.report.has(codes.METADATA_SECTION_HAS_NO_REFERENCE)


class TestLegacySections:
    """Tests for MetadataResolver.resolve_legacy_sections()."""

    def test_classification_and_order(self, context, legacy_package_dir):
        """Documents come first; unclassified sections are skipped with a warning."""
        document = read_mets(legacy_package_dir / "METS.xml")
        file_resolver = FileResolver(context, package_root=legacy_package_dir)
        metadata_resolver = MetadataResolver(context, file_resolver)

        records = metadata_resolver.resolve_legacy_sections(
            ["DMD_EXP", "DMD_LOCAL", "DMD_UNK", "DMD_DOC1"], document.index(), legacy_package_dir
        )

        assert [r.id for r in records] == ["DMD_DOC1", "DMD_EXP", "DMD_LOCAL"]
        assert records[0].metadata_type.category is MetadataCategory.I_ARXIU_DOC
        assert records[1].metadata_type.category is MetadataCategory.I_ARXIU_EXP
        assert records[1].metadata_type.other_value == "Voc_expedient"
        assert records[2].metadata_type.other_value == "local-schema"
        assert context.report.has(codes.METADATA_SECTION_CLASSIFIED_BY_DEFAULT, ValidationLevel.WARN)
        assert context.report.has(codes.METADATA_SECTION_UNCLASSIFIED, ValidationLevel.WARN)


class TestExtensionFor:
    @pytest.mark.parametrize(
        "mimetype,extension",
        [(None, ".xml"), ("text/xml", ".xml"), ("application/mods+xml", ".xml"), ("text/plain; charset=utf-8", ".txt")],
    )
    def test_extensions(self, mimetype, extension):
        assert extension_for(mimetype) == extension
