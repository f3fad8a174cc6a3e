"""Filter changed paths before attribution."""

from collections.abc import Iterable
from dataclasses import dataclass, field

# Mostly machine-edited files; their blame says little about expertise
DEFAULT_IGNORED_EXTENSIONS: tuple[str, ...] = ("svg", "json", "nock", "xml")


def _normalize_extension(ext: str) -> str:
    return ext.strip().lstrip(".").lower()


def split_list_arg(value: str | Iterable[str] | None) -> list[str]:
    """Split a ``"a,b c"`` style argument on commas and whitespace."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    items: list[str] = []
    for chunk in value:
        items.extend(part for part in chunk.replace(",", " ").split() if part)
    return items


@dataclass
class PathFilter:
    """Extension and prefix based path filter.

    ``only_extensions`` takes priority over ignored extensions, and
    ``only_paths`` over ``ignored_paths``. The default ignored extensions
    always apply unless ``only_extensions`` is set.
    """

    ignored_extensions: list[str] = field(default_factory=list)
    only_extensions: list[str] = field(default_factory=list)
    ignored_paths: list[str] = field(default_factory=list)
    only_paths: list[str] = field(default_factory=list)
    use_default_ignores: bool = True

    def __post_init__(self) -> None:
        self.ignored_extensions = [_normalize_extension(e) for e in self.ignored_extensions if e.strip()]
        self.only_extensions = [_normalize_extension(e) for e in self.only_extensions if e.strip()]
        self.ignored_paths = [p.strip() for p in self.ignored_paths if p.strip()]
        self.only_paths = [p.strip() for p in self.only_paths if p.strip()]

    @property
    def effective_ignored_extensions(self) -> list[str]:
        defaults = list(DEFAULT_IGNORED_EXTENSIONS) if self.use_default_ignores else []
        return defaults + self.ignored_extensions

    def _has_extension(self, path: str, extensions: Iterable[str]) -> bool:
        lowered = path.lower()
        return any(lowered.endswith(f".{ext}") for ext in extensions)

    def consider_extension(self, path: str) -> bool:
        if self.only_extensions:
            return self._has_extension(path, self.only_extensions)
        return not self._has_extension(path, self.effective_ignored_extensions)

    def consider_path(self, path: str) -> bool:
        if self.only_paths:
            return any(path.startswith(prefix) for prefix in self.only_paths)
        return not any(path.startswith(prefix) for prefix in self.ignored_paths)

    def allows(self, path: str) -> bool:
        """True when ``path`` passes both the extension and prefix checks."""
        return self.consider_extension(path) and self.consider_path(path)

    def apply(self, paths: Iterable[str]) -> list[str]:
        """Filter ``paths``, preserving order."""
        return [path for path in paths if self.allows(path)]


__all__ = ["DEFAULT_IGNORED_EXTENSIONS", "PathFilter", "split_list_arg"]
