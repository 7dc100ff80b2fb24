"""Tests for settings, cancellation and exceptions."""

import json

import pytest

from infopack.cancellation import CancellationToken
from infopack.config import Settings
from infopack.exceptions import (
    BuildError,
    ChecksumMismatchError,
    ContainerError,
    InfopackError,
    IntegrityError,
    MetsReadError,
    OperationCancelled,
    ParseError,
    UnknownAlgorithmError,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.encode_href is True
        assert settings.checksum_algorithm == "SHA-256"
        assert settings.chunk_size == 1024 * 1024
        assert settings.validate_schema is False
        assert settings.schema_path is None
        assert settings.require_representation_type_parts is False
        assert settings.profile == "eark"
        assert settings.creator_agent_name == "infopack"

    def test_from_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"encode_href": False, "schema_path": "mets.xsd", "chunk_size": "4096"}))

        settings = Settings.from_file(path)

        assert settings.encode_href is False
        assert settings.schema_path.name == "mets.xsd"
        assert settings.chunk_size == 4096

    def test_from_file_not_an_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")

        with pytest.raises(ValueError, match="JSON object"):
            Settings.from_file(path)

    def test_with_overrides(self):
        """Overrides return a copy and ignore None values."""
        settings = Settings({"profile": "iarxiu", "encode_href": False})

        overridden = settings.with_overrides(profile=None, checksum_algorithm="MD5")

        assert overridden.profile == "iarxiu"
        assert overridden.checksum_algorithm == "MD5"
        assert settings.checksum_algorithm == "SHA-256"
        assert overridden.as_dict() == {"profile": "iarxiu", "encode_href": False, "checksum_algorithm": "MD5"}


class TestCancellationToken:
    def test_check(self):
        token = CancellationToken()
        token.check()

        token.cancel()

        assert token.cancelled
        with pytest.raises(OperationCancelled):
            token.check()


class TestExceptions:
    """Tests for the exception hierarchy."""

    @pytest.mark.parametrize(
        "exc_class", [ParseError, BuildError, ContainerError, MetsReadError, IntegrityError, OperationCancelled]
    )
    def test_base_class(self, exc_class):
        assert issubclass(exc_class, InfopackError)

    def test_message(self):
        error = ContainerError("cannot open")

        assert error.message == "cannot open"
        assert str(error) == "cannot open"

    def test_mets_read_error_collects_errors(self):
        error = MetsReadError("invalid", ["line 1", "line 2"])

        assert error.errors == ["line 1", "line 2"]
        assert MetsReadError("invalid").errors == []

    def test_checksum_mismatch(self):
        error = ChecksumMismatchError(expected="aa", actual="bb", path="data/x")

        assert isinstance(error, IntegrityError)
        assert "expected aa, got bb" in str(error)

    def test_unknown_algorithm(self):
        assert UnknownAlgorithmError("CRC32").algorithm == "CRC32"

    def test_operation_cancelled_default_message(self):
        assert str(OperationCancelled()) == "Operation cancelled"
