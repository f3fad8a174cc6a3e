"""Tests for changed-path filtering."""

import pytest

from gitreviewer.pathfilter import DEFAULT_IGNORED_EXTENSIONS, PathFilter, split_list_arg


class TestSplitListArg:
    """Tests for split_list_arg()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, []),
            ("", []),
            ("svg", ["svg"]),
            ("svg,png, jpg", ["svg", "png", "jpg"]),
            ("svg png", ["svg", "png"]),
            (["a,b", "c"], ["a", "b", "c"]),
        ],
    )
    def test_split(self, value, expected) -> None:
        assert split_list_arg(value) == expected


class TestPathFilter:
    """Tests for PathFilter."""

    def test_default_ignores(self) -> None:
        path_filter = PathFilter()
        for ext in DEFAULT_IGNORED_EXTENSIONS:
            assert not path_filter.allows(f"assets/file.{ext}")
        assert path_filter.allows("src/main.py")

    def test_default_ignores_can_be_disabled(self) -> None:
        assert PathFilter(use_default_ignores=False).allows("package.json")

    def test_extension_match_is_case_insensitive_and_dot_tolerant(self) -> None:
        path_filter = PathFilter(ignored_extensions=[".PNG"])
        assert not path_filter.allows("logo.png")
        assert not path_filter.allows("LOGO.Png")

    def test_extension_needs_a_dot(self) -> None:
        """A file named like an extension is not an extension match."""
        assert PathFilter(ignored_extensions=["lock"]).allows("lock")

    def test_only_extensions_override_ignores(self) -> None:
        path_filter = PathFilter(only_extensions=["json", "py"], ignored_extensions=["py"])
        assert path_filter.allows("config.json")
        assert path_filter.allows("app.py")
        assert not path_filter.allows("README.md")

    def test_ignored_path_prefix(self) -> None:
        path_filter = PathFilter(ignored_paths=["vendor/"])
        assert not path_filter.allows("vendor/lib.py")
        assert path_filter.allows("src/vendor.py")

    def test_only_paths_override_ignored_paths(self) -> None:
        path_filter = PathFilter(only_paths=["src"], ignored_paths=["src"])
        assert path_filter.allows("src/app.py")
        assert not path_filter.allows("docs/index.md")

    def test_extension_and_prefix_both_apply(self) -> None:
        path_filter = PathFilter(only_paths=["src"])
        assert not path_filter.allows("src/data.json")

    def test_apply_preserves_order(self) -> None:
        paths = ["b.py", "a.svg", "c.go", "a.py"]
        assert PathFilter().apply(paths) == ["b.py", "c.go", "a.py"]

    def test_blank_entries_dropped(self) -> None:
        path_filter = PathFilter(ignored_extensions=["", "  "], only_paths=[" "])
        assert path_filter.ignored_extensions == []
        assert path_filter.only_paths == []
        assert path_filter.allows("x.py")
