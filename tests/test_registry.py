"""Tests for metadata type and vocabulary resolution."""

import pytest

from infopack import registry
from schemas.vocabulary import (
    ContentCategory,
    CreatorType,
    IPRole,
    IPStatus,
    MetadataCategory,
    MetadataType,
    RepresentationStatusCategory,
)


class TestMatch:
    """Tests for registry.match()."""

    def test_exact_member_name(self):
        """Canonical member names match exactly."""
        assert registry.match("I_ARXIU_DOC") is MetadataCategory.I_ARXIU_DOC
        assert registry.match("LCAV") is MetadataCategory.LCAV

    def test_display_value_case_insensitive(self):
        """Display values match regardless of case."""
        assert registry.match("dc") is MetadataCategory.DC
        assert registry.match("lc-av") is MetadataCategory.LCAV
        assert registry.match("IARXIU-EXP") is MetadataCategory.I_ARXIU_EXP

    @pytest.mark.parametrize(
        "alias",
        ["Dublin Core", "DUBLINCORE", "oai_dc", "SimpleDC", "ISO 15836", "urn:iso:std:iso:15836"],
    )
    def test_dublin_core_aliases(self, alias):
        """Common Dublin Core spellings resolve to DC."""
        assert registry.match(alias) is MetadataCategory.DC

    @pytest.mark.parametrize(
        ("alias", "category"),
        sorted(registry.METADATA_ALIASES.items()),
    )
    def test_every_alias_resolves(self, alias, category):
        """Each alias in the table resolves to its category."""
        assert registry.resolve(alias).category is category

    @pytest.mark.parametrize(
        ("alias", "category"),
        [
            ("urn:iarxiu:2.0:vocabularies:cesca:Voc_document_exp", MetadataCategory.I_ARXIU_VOC_DOC_EXP),
            ("Lc Av", MetadataCategory.LCAV),
            ("iso19115:2003", MetadataCategory.ISO191152003),
            ("eac_cpf", MetadataCategory.EACCPF),
        ],
    )
    def test_alias_lookup_ignores_case(self, alias, category):
        """Aliases match whatever the case of the declared string."""
        assert registry.resolve(alias).category is category

    def test_unknown_returns_none(self):
        """Unrecognized and empty strings do not match."""
        assert registry.match("my-local-schema") is None
        assert registry.match("") is None
        assert registry.match(None) is None


class TestResolve:
    """Tests for registry.resolve() and as_canonical_string()."""

    def test_known_type(self):
        """A known type resolves to its category."""
        metadata_type = registry.resolve("PREMIS")

        assert metadata_type.category is MetadataCategory.PREMIS
        assert registry.as_canonical_string(metadata_type) == "PREMIS"

    @pytest.mark.parametrize("raw", ["my-local-schema", "", "Ümlaut type", "  spaced  "])
    def test_unknown_type_round_trips(self, raw):
        """Unknown strings resolve to OTHER and come back unchanged."""
        metadata_type = registry.resolve(raw)

        assert metadata_type.category is MetadataCategory.OTHER
        assert registry.as_canonical_string(metadata_type) == raw

    def test_resolution_is_stable(self):
        """Resolving the canonical string again gives the same category."""
        for category in MetadataCategory:
            if category is MetadataCategory.OTHER:
                continue
            first = registry.resolve(category.value)
            again = registry.resolve(registry.as_canonical_string(first))
            assert again.category is first.category

    def test_is_recognized(self):
        assert registry.is_recognized("MODS")
        assert not registry.is_recognized("nope")


class TestResolveDeclared:
    """Tests for registry.resolve_declared()."""

    def test_other_refined_by_other_mdtype(self):
        """OTHER with a recognized OTHERMDTYPE resolves to that type."""
        metadata_type = registry.resolve_declared("OTHER", "Dublin Core")

        assert metadata_type.category is MetadataCategory.DC

    def test_other_with_unknown_other_mdtype(self):
        """OTHER with an unknown OTHERMDTYPE keeps the string."""
        metadata_type = registry.resolve_declared("OTHER", "local")

        assert metadata_type == MetadataType(category=MetadataCategory.OTHER, other_value="local")

    def test_known_mdtype_keeps_other_mdtype(self):
        """A known MDTYPE keeps OTHERMDTYPE as informative value."""
        metadata_type = registry.resolve_declared("DC", "qualified")

        assert metadata_type.category is MetadataCategory.DC
        assert metadata_type.other_value == "qualified"

    def test_missing_other_mdtype(self):
        assert registry.resolve_declared("MODS", None).category is MetadataCategory.MODS


class TestMetsAttributes:
    """Tests for registry.mets_mdtype_attributes()."""

    def test_mets_enumerated_type(self):
        """Types in the METS enumeration are written as MDTYPE."""
        assert registry.mets_mdtype_attributes(MetadataType(category=MetadataCategory.DC)) == ("DC", None)

    def test_non_mets_type_written_as_other(self):
        """Types outside the METS enumeration become OTHER + OTHERMDTYPE."""
        metadata_type = MetadataType(category=MetadataCategory.I_ARXIU_DOC)

        mdtype, other = registry.mets_mdtype_attributes(metadata_type)

        assert (mdtype, other) == ("OTHER", "iArxiu-doc")
        assert registry.resolve_declared(mdtype, other).category is MetadataCategory.I_ARXIU_DOC

    def test_non_mets_type_drops_informative_value(self):
        """Only the category of a non-METS type is written."""
        metadata_type = MetadataType(
            category=MetadataCategory.I_ARXIU_DOC,
            other_value="urn:iarxiu:2.0:vocabularies:cesca:Voc_document_exp",
        )

        mdtype, other = registry.mets_mdtype_attributes(metadata_type)
        restored = registry.resolve_declared(mdtype, other)

        assert (mdtype, other) == ("OTHER", "iArxiu-doc")
        assert restored == MetadataType(category=MetadataCategory.I_ARXIU_DOC)

    def test_other_type(self):
        metadata_type = MetadataType(category=MetadataCategory.OTHER, other_value="key-value")

        assert registry.mets_mdtype_attributes(metadata_type) == ("OTHER", "key-value")


class TestVocabularies:
    """Tests for content type, role, status and agent type parsing."""

    def test_content_type_recognized(self):
        content_type, recognized = registry.parse_content_type("erms")

        assert content_type.category is ContentCategory.ERMS
        assert recognized

    def test_content_type_unknown_keeps_raw(self):
        """Unknown content types become OTHER with the raw value."""
        content_type, recognized = registry.parse_content_type("Photographs")

        assert content_type.category is ContentCategory.OTHER
        assert content_type.as_string() == "Photographs"
        assert not recognized

    def test_content_type_unknown_uses_default(self):
        content_type, recognized = registry.parse_content_type(
            "whatever", default=ContentCategory.PL_EXPEDIENT
        )

        assert content_type.category is ContentCategory.PL_EXPEDIENT
        assert not recognized

    def test_role(self):
        assert registry.parse_role("aip") is IPRole.AIP
        assert registry.parse_role("XIP") is None

    def test_status(self):
        """Unknown statuses fall back to NEW and are flagged."""
        assert registry.parse_status("updated") == (IPStatus.UPDATED, True)
        assert registry.parse_status("") == (IPStatus.NEW, True)
        assert registry.parse_status("ARCHIVED") == (IPStatus.NEW, False)

    def test_representation_status(self):
        assert registry.parse_representation_status(None).category is RepresentationStatusCategory.ORIGINAL
        normalized = registry.parse_representation_status("NORMALIZED")
        assert normalized.category is RepresentationStatusCategory.OTHER
        assert normalized.as_string() == "NORMALIZED"

    def test_creator_type(self):
        assert registry.parse_creator_type("individual") == (CreatorType.INDIVIDUAL, None)
        assert registry.parse_creator_type("SOFTWARE") == (CreatorType.OTHER, "SOFTWARE")
        assert registry.parse_creator_type(None) == (CreatorType.ORGANIZATION, None)
