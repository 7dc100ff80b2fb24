"""Tests for Pydantic schema models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from schemas.mets import Div, FileEntry, FileGroup, FileLocation, MetadataReference, MetadataSection, MetsDocument
from schemas.package import (
    DescriptiveMetadata,
    IPFile,
    Package,
    PreservationMetadata,
    Representation,
)
from schemas.vocabulary import (
    ContentCategory,
    ContentType,
    IPRole,
    MetadataCategory,
    MetadataType,
    RepresentationStatus,
    RepresentationStatusCategory,
)


class TestIPFile:
    """Tests for IPFile model."""

    def test_file_name_defaults_to_basename(self):
        ip_file = IPFile(path=Path("/tmp/data/report.pdf"))

        assert ip_file.file_name == "report.pdf"
        assert ip_file.relative_path == "report.pdf"

    def test_renamed_returns_copy(self):
        """Renaming never mutates the original."""
        original = IPFile(path=Path("/tmp/a.txt"))

        renamed = original.renamed("b.txt")

        assert renamed.file_name == "b.txt"
        assert original.file_name == "a.txt"

    def test_in_folders(self):
        ip_file = IPFile(path=Path("/tmp/a.txt")).in_folders("x", "y")

        assert ip_file.relative_path == "x/y/a.txt"

    def test_frozen(self):
        ip_file = IPFile(path=Path("/tmp/a.txt"))

        with pytest.raises(ValidationError):
            ip_file.file_name = "other"


class TestMetadataRecords:
    def test_preservation_default_type(self):
        record = PreservationMetadata(id="P1", file=IPFile(path=Path("/tmp/p.xml")))

        assert record.metadata_type.category is MetadataCategory.PREMIS

    def test_descriptive_version(self):
        record = DescriptiveMetadata(id="D1", file=IPFile(path=Path("/tmp/d.xml")), metadata_version="2.0")

        assert record.metadata_version == "2.0"
        assert record.metadata_type.category is MetadataCategory.OTHER


class TestVocabularyModels:
    def test_metadata_type_canonical_string(self):
        assert MetadataType(category=MetadataCategory.LCAV).as_canonical_string() == "LC-AV"
        assert MetadataType(other_value="local").as_canonical_string() == "local"
        assert str(MetadataType(category=MetadataCategory.DC, other_value="qualified")) == "DC"

    def test_content_type_string(self):
        assert ContentType().as_string() == "MIXED"
        assert ContentType(category=ContentCategory.OTHER, other_value="Photos").as_string() == "Photos"

    def test_representation_status_string(self):
        assert RepresentationStatus().as_string() == "ORIGINAL"
        status = RepresentationStatus(category=RepresentationStatusCategory.OTHER, other_value="NORMALIZED")
        assert status.as_string() == "NORMALIZED"


class TestPackage:
    """Tests for Package model."""

    def test_defaults(self):
        package = Package()

        assert package.id is None
        assert package.role is IPRole.SIP
        assert package.content_type.category is ContentCategory.MIXED
        assert package.report.is_valid()

    def test_primary_id(self):
        assert Package(ids=["a", "b"]).id == "a"

    def test_submissions_only_on_aip(self):
        package = Package(ids=["p"])

        with pytest.raises(ValueError, match="Only AIPs"):
            package.add_submission(IPFile(path=Path("/tmp/s.txt")))

        package.role = IPRole.AIP
        package.add_submission(IPFile(path=Path("/tmp/s.txt")))
        assert len(package.submissions) == 1

    def test_get_representation(self):
        package = Package(representations=[Representation(representation_id="rep1")])

        assert package.get_representation("rep1").representation_id == "rep1"
        assert package.get_representation("rep9") is None

    def test_representation_has_metadata(self):
        representation = Representation(representation_id="rep1")
        assert not representation.has_metadata

        representation.preservation_metadata.append(
            PreservationMetadata(id="P", file=IPFile(path=Path("/tmp/p.xml")))
        )
        assert representation.has_metadata

    def test_json_round_trip(self):
        package = Package(
            ids=["p1"],
            representations=[
                Representation(
                    representation_id="rep1",
                    data=[IPFile(path=Path("/tmp/a.txt")).in_folders("sub")],
                )
            ],
        )

        restored = Package.model_validate_json(package.model_dump_json(exclude={"report"}))

        assert restored.representations[0].data[0].relative_path == "sub/a.txt"


class TestMetsDocument:
    def test_index_prefers_first_definition(self):
        document = MetsDocument(
            metadata_sections=[
                MetadataSection(id="X", reference=MetadataReference(id="REF", href="a.xml")),
            ],
            file_groups=[
                FileGroup(
                    id="G",
                    files=[FileEntry(id="X", locations=[FileLocation(href="b")])],
                    groups=[FileGroup(id="G2", files=[FileEntry(id="F2")])],
                )
            ],
        )

        index = document.index()

        assert isinstance(index["X"], MetadataSection)
        assert isinstance(index["F2"], FileEntry)
        assert index["REF"].id == "X"

    def test_all_files_recursive(self):
        group = FileGroup(files=[FileEntry(id="A")], groups=[FileGroup(files=[FileEntry(id="B")])])

        assert [f.id for f in group.all_files()] == ["A", "B"]

    def test_div_describe(self):
        assert Div(label="data", id="D1").describe() == "div[LABEL='data', ID='D1']"
