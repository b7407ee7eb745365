import pytest

from easy_params import FORMAT_VERSION, FormatVersionError
from easy_params.schema.json_schema_loader import get_schema_path, load_schema, resolve_schema_version
from easy_params.schema.versioning import (
    CURRENT_FORMAT,
    Compatibility,
    FormatVersion,
    judge_format_version,
)


def test_parse_format_version():
    assert FormatVersion.parse("0.1.0") == FormatVersion(0, 1, 0)
    assert FormatVersion.parse("v1.2.3") == FormatVersion(1, 2, 3)
    assert str(FormatVersion.parse(" 2.0.10 ")) == "2.0.10"
    assert FormatVersion.parse("0.2.0") > FormatVersion.parse("0.1.9")
    assert str(CURRENT_FORMAT) == FORMAT_VERSION


@pytest.mark.parametrize("raw", ["1.0", "latest", "1.0.0-rc1", 1.0])
def test_parse_format_version_rejects_garbage(raw):
    with pytest.raises(FormatVersionError, match="MAJOR.MINOR.PATCH"):
        FormatVersion.parse(raw)


def test_judge_format_version():
    missing = judge_format_version(None)
    assert missing.compatibility is Compatibility.UNDECLARED
    assert missing.readable and missing.worth_a_warning
    assert "Missing 'easy_params_format'" in missing.message

    current = judge_format_version(FORMAT_VERSION)
    assert current.compatibility is Compatibility.CURRENT
    assert not current.worth_a_warning
    assert judge_format_version("0.1.7").declared == FormatVersion(0, 1, 7)

    newer = judge_format_version("0.3.0")
    assert newer.compatibility is Compatibility.NEWER_MINOR
    assert newer.readable and newer.worth_a_warning

    major = judge_format_version("1.0.0")
    assert not major.readable
    assert "Incompatible format version 1.0.0" in major.message

    garbage = judge_format_version("one")
    assert garbage.compatibility is Compatibility.UNSUPPORTED
    assert garbage.declared is None


def test_schema_versions_resolve_within_major():
    assert resolve_schema_version("0.1.0") == "0.1.0"
    assert resolve_schema_version("0.1.5") == "0.1.0"
    assert resolve_schema_version("0.4.0") == "0.1.0"
    assert resolve_schema_version("9.0.0") == "9.0.0"
    assert get_schema_path("0.1.0").is_file()


def test_load_schema_is_cached():
    schema = load_schema("0.1.0")

    assert schema["title"] == "easy_params schema definition file"
    assert load_schema("0.1.0") is schema
    with pytest.raises(FileNotFoundError):
        load_schema("9.0.0")
