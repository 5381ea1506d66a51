"""Unit tests for the npm version gate."""

import pytest

from lockpatch.exceptions import PreconditionError
from lockpatch.validation import check_npm_version


@pytest.mark.unit
class TestCheckNpmVersion:
    @pytest.mark.parametrize(
        "version,major",
        [("7.0.0", 7), ("9.6.4", 9), ("10.2.0", 10), ("v8.19.4", 8), ("11.0.0-pre.1\n", 11)],
    )
    def test_supported_versions(self, version, major):
        assert check_npm_version(version) == major

    @pytest.mark.parametrize("version", ["6.14.8", "5.6.0", "0.1.0"])
    def test_old_versions_rejected(self, version):
        with pytest.raises(PreconditionError, match="requires npm v7 or higher") as excinfo:
            check_npm_version(version)
        assert f"npm v{version}" in str(excinfo.value)

    @pytest.mark.parametrize("version", ["", "unknown", "x.y.z"])
    def test_unparseable_versions_rejected(self, version):
        with pytest.raises(PreconditionError, match="Could not determine npm version"):
            check_npm_version(version)

    def test_custom_minimum(self):
        with pytest.raises(PreconditionError):
            check_npm_version("9.0.0", minimum=10)
