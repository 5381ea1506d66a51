"""Unit tests for package specifier parsing."""

import pytest

from lockpatch.exceptions import InvalidSpecifierError
from lockpatch.schemas import PackageSpec
from lockpatch.utils import is_scoped, parse_specifier, parse_specifiers


class TestParseSpecifier:
    """Tests for parse_specifier function."""

    def test_name_and_version(self):
        assert parse_specifier("foo@1.2.3") == PackageSpec(name="foo", version="1.2.3")

    def test_scoped_name_and_version(self):
        assert parse_specifier("@scope/foo@1.2.3") == PackageSpec(
            name="@scope/foo", version="1.2.3"
        )

    def test_name_only(self):
        assert parse_specifier("foo") == PackageSpec(name="foo", version="")

    def test_scoped_name_only(self):
        assert parse_specifier("@scope/foo") == PackageSpec(name="@scope/foo", version="")

    def test_trailing_at_gives_empty_version(self):
        """A dangling "@" means no version; the resolver default applies."""
        assert parse_specifier("foo@") == PackageSpec(name="foo", version="")
        assert parse_specifier("@scope/foo@") == PackageSpec(name="@scope/foo", version="")

    def test_ranges_and_tags_pass_through(self):
        assert parse_specifier("react@^18.2.0").version == "^18.2.0"
        assert parse_specifier("@types/node@latest").version == "latest"

    def test_surrounding_whitespace_ignored(self):
        assert parse_specifier("  left-pad@1.3.0 ") == PackageSpec(name="left-pad", version="1.3.0")

    @pytest.mark.parametrize("raw", ["", "@", "   "])
    def test_missing_name_raises(self, raw):
        with pytest.raises(InvalidSpecifierError, match="Invalid package format"):
            parse_specifier(raw)

    def test_error_names_the_token(self):
        with pytest.raises(InvalidSpecifierError) as excinfo:
            parse_specifier("@")
        assert '"@"' in str(excinfo.value)


class TestParseSpecifiers:
    """Tests for parsing a whole argument list."""

    def test_parses_all_in_order(self):
        specs = parse_specifiers(["a@1", "@s/b", "c"])
        assert [s.name for s in specs] == ["a", "@s/b", "c"]

    def test_one_bad_token_fails_the_list(self):
        with pytest.raises(InvalidSpecifierError):
            parse_specifiers(["a@1", "@", "c"])


class TestPackageSpec:
    """Tests for rendering specs back for the resolver."""

    def test_specifier_with_version(self):
        assert PackageSpec(name="@scope/foo", version="2.0.0").specifier == "@scope/foo@2.0.0"

    def test_specifier_without_version(self):
        assert PackageSpec(name="foo").specifier == "foo"

    def test_is_scoped(self):
        assert is_scoped("@babel/core") is True
        assert is_scoped("babel") is False
        assert is_scoped("@") is False
