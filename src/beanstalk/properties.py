"""Flat key/value property sources loaded from ``.properties`` files."""

import re
from collections.abc import Iterator, Mapping
from os import PathLike
from pathlib import Path
from typing import Optional, Union

import structlog

from beanstalk.converter import convert
from beanstalk.errors import ConfigLoadError

__all__ = ["PropertySource"]

logger = structlog.get_logger()

_SEPARATOR = re.compile(r"[=:]|\s")


class PropertySource(Mapping):
    """Read-only mapping of property keys to trimmed string values.

    Example:
        >>> properties = PropertySource.load("app.properties")
        >>> properties["greeting"]
        'hello'
        >>> properties.get_int("retries")
        3
    """

    def __init__(self, values: Optional[Mapping] = None):
        self._values: dict[str, str] = {
            str(key).strip(): str(value).strip() for key, value in (values or {}).items()
        }

    @classmethod
    def load(cls, resource_name: Union[str, PathLike]) -> "PropertySource":
        """Read and parse a UTF-8 ``.properties`` file.

        Args:
            resource_name: Path of the file to read.

        Returns:
            The parsed :class:`PropertySource`.

        Raises:
            ConfigLoadError: If the file cannot be read or decoded.
        """
        try:
            text = Path(resource_name).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigLoadError(str(resource_name)) from exc

        source = cls.parse(text)
        logger.debug("properties.loaded", resource=str(resource_name), count=len(source))
        return source

    @classmethod
    def parse(cls, text: str) -> "PropertySource":
        """Parse properties text.

        Blank lines and lines starting with ``#`` or ``!`` are ignored. A line
        ending in an odd number of backslashes continues on the next line. The
        key ends at the first ``=``, ``:`` or whitespace character. Later
        duplicates override earlier ones.
        """
        return cls(dict(_parse_entries(text)))

    def get_value(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def get_int(self, key: str) -> int:
        return convert(self[key], int)

    def get_bool(self, key: str) -> bool:
        return convert(self[key], bool)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PropertySource({self._values!r})"


def _parse_entries(text: str) -> Iterator[tuple[str, str]]:
    for line in _logical_lines(text):
        match = _SEPARATOR.search(line)
        if match is None:
            yield line, ""
            continue
        key = line[: match.start()].strip()
        rest = line[match.end():].strip()
        if match.group().isspace() and rest[:1] in ("=", ":"):
            rest = rest[1:].strip()
        yield key, rest


def _logical_lines(text: str) -> Iterator[str]:
    pending = ""
    for raw in text.splitlines():
        line = raw.lstrip()
        if not pending and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending
