"""Results store shared by the validate and report passes.

The two passes run as separate processes, so validation outcomes travel
through two line-oriented UTF-8 text files in the results directory:

``settings.properties``
    ``key=value`` lines for the tree-shaping settings::

        formatVersion=1
        recursive=true
        skipTestScope=false
        skipProvidedScope=false
        skipOptionals=false

    A missing boolean key reads as ``true``.

``results.txt``
    A version header line followed by one record per validation result.
    Fields are separated by ``|``::

        coordinate|scope|name|url|canonical name|canonical url|valid

    where ``coordinate`` is ``group:name:version``. Backslash escapes
    ``\\\\``, ``\\|``, ``\\:``, ``\\n`` and ``\\r`` keep delimiters and line
    breaks inside values from corrupting record boundaries. Empty optional
    fields read back as None. There is no record count: end of file ends the
    stream.
"""
from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import IO, Iterable, Iterator, Optional

from license_validator.constants import (
    RESULTS_FILE_NAME,
    RESULTS_FORMAT_VERSION,
    RESULTS_HEADER,
    SETTINGS_FILE_NAME,
)
from license_validator.exceptions import PersistenceError
from license_validator.logging import get_logger
from license_validator.models.artifact import ArtifactCoordinate, ArtifactScope
from license_validator.models.config import RunSettings
from license_validator.models.validation import (
    KnownLicense,
    ResultsIndex,
    ValidationResult,
)

log = get_logger(__name__)

ENCODING = "utf-8"
FIELD_DELIMITER = "|"
COORDINATE_DELIMITER = ":"
ESCAPE_CHAR = "\\"
FIELD_COUNT = 7

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    "|": "\\|",
    ":": "\\:",
    "\n": "\\n",
    "\r": "\\r",
}
_UNESCAPES: dict[str, str] = {
    "\\": "\\",
    "|": "|",
    ":": ":",
    "n": "\n",
    "r": "\r",
}

# Settings file keys, in the order they are written
SETTINGS_KEYS: dict[str, str] = {
    "recursive": "recursive",
    "skipTestScope": "skip_test_scope",
    "skipProvidedScope": "skip_provided_scope",
    "skipOptionals": "skip_optionals",
}
FORMAT_VERSION_KEY = "formatVersion"


def escape_field(value: str) -> str:
    """Escape delimiters and line breaks in a field value."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


def unescape_field(text: str) -> str:
    """Reverse :func:`escape_field`.

    Raises:
        ValueError: On an unknown or dangling escape sequence.
    """
    chars: list[str] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == ESCAPE_CHAR:
            if pos + 1 >= len(text):
                raise ValueError("dangling escape character")
            code = text[pos + 1]
            if code not in _UNESCAPES:
                raise ValueError(f"unknown escape sequence '\\{code}'")
            chars.append(_UNESCAPES[code])
            pos += 2
        else:
            chars.append(ch)
            pos += 1
    return "".join(chars)


def split_escaped(text: str, delimiter: str) -> list[str]:
    """Split on unescaped delimiters, keeping escape sequences in the parts.

    Raises:
        ValueError: If the text ends with a dangling escape character.
    """
    parts: list[str] = []
    current: list[str] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch == ESCAPE_CHAR:
            if pos + 1 >= len(text):
                raise ValueError("dangling escape character")
            current.append(text[pos : pos + 2])
            pos += 2
        elif ch == delimiter:
            parts.append("".join(current))
            current = []
            pos += 1
        else:
            current.append(ch)
            pos += 1
    parts.append("".join(current))
    return parts


def encode_coordinate(coordinate: ArtifactCoordinate) -> str:
    """Encode a coordinate as an escaped ``group:name:version`` field."""
    return COORDINATE_DELIMITER.join(
        escape_field(part)
        for part in (coordinate.group, coordinate.name, coordinate.version)
    )


def decode_coordinate(text: str) -> ArtifactCoordinate:
    """Decode an escaped ``group:name:version`` field.

    Raises:
        ValueError: If the field is not a valid coordinate.
    """
    parts = [unescape_field(p) for p in split_escaped(text, COORDINATE_DELIMITER)]
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"invalid artifact coordinate '{text}'")
    return ArtifactCoordinate(group=parts[0], name=parts[1], version=parts[2])


def encode_result(result: ValidationResult) -> str:
    """Encode a validation result as one record line (without newline)."""
    fields = [
        encode_coordinate(result.artifact),
        escape_field(result.scope.value),
        escape_field(result.original_license_name),
        escape_field(result.original_license_url or ""),
        escape_field(result.license.name if result.license else ""),
        escape_field(result.license.url if result.license else ""),
        "true" if result.valid else "false",
    ]
    return FIELD_DELIMITER.join(fields)


def decode_result(line: str) -> ValidationResult:
    """Decode one record line.

    Raises:
        ValueError: If the record is malformed.
    """
    raw = split_escaped(line, FIELD_DELIMITER)
    if len(raw) != FIELD_COUNT:
        raise ValueError(f"expected {FIELD_COUNT} fields, found {len(raw)}")

    coordinate = decode_coordinate(raw[0])
    scope_text, name, url, known_name, known_url = (
        unescape_field(f) for f in raw[1:6]
    )
    valid_text = raw[6]

    try:
        scope = ArtifactScope(scope_text)
    except ValueError:
        raise ValueError(f"unknown scope '{scope_text}'") from None

    if not name:
        raise ValueError("empty license name")

    if valid_text not in ("true", "false"):
        raise ValueError(f"invalid valid flag '{valid_text}'")

    if bool(known_name) != bool(known_url):
        raise ValueError("catalog license name and URL must both be set or empty")
    known = KnownLicense(name=known_name, url=known_url) if known_name else None

    return ValidationResult(
        artifact=coordinate,
        scope=scope,
        original_license_name=name,
        original_license_url=url or None,
        license=known,
        valid=valid_text == "true",
    )


class ResultsWriter:
    """Writes validation results record by record.

    Use as a context manager so the file is closed on every exit path.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._file: Optional[IO[str]] = None
        self.count = 0

    def __enter__(self) -> ResultsWriter:
        try:
            self._file = self._path.open("w", encoding=ENCODING, newline="\n")
            self._file.write(RESULTS_HEADER + "\n")
        except (OSError, UnicodeEncodeError) as e:
            self.close()
            raise PersistenceError(
                f"Cannot write results file '{self._path}': {e}"
            ) from e
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def write(self, result: ValidationResult) -> None:
        """Append one record.

        Raises:
            PersistenceError: If the record cannot be written.
        """
        if self._file is None:
            raise PersistenceError("Results writer is not open")
        try:
            self._file.write(encode_result(result) + "\n")
        except (OSError, UnicodeEncodeError) as e:
            raise PersistenceError(
                f"Cannot write results file '{self._path}': {e}"
            ) from e
        self.count += 1

    def close(self) -> None:
        """Close the underlying file."""
        if self._file is not None:
            self._file.close()
            self._file = None


class ResultsReader:
    """Reads validation results record by record.

    :meth:`read` returns the next record, or None at end of stream.
    Malformed records raise :class:`PersistenceError`.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._file: Optional[IO[str]] = None
        self._line_number = 0

    def __enter__(self) -> ResultsReader:
        try:
            self._file = self._path.open("r", encoding=ENCODING)
        except OSError as e:
            raise PersistenceError(
                f"Cannot read results file '{self._path}': {e}"
            ) from e
        try:
            self._read_header()
        except PersistenceError:
            self.close()
            raise
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def __iter__(self) -> Iterator[ValidationResult]:
        while True:
            result = self.read()
            if result is None:
                return
            yield result

    def read(self) -> Optional[ValidationResult]:
        """Read the next record.

        Returns:
            The next ValidationResult, or None at end of stream.

        Raises:
            PersistenceError: If the record is malformed or unreadable.
        """
        line = self._next_line()
        if line is None:
            return None
        try:
            return decode_result(line)
        except ValueError as e:
            raise PersistenceError(
                f"Malformed record in '{self._path}' line {self._line_number}: {e}"
            ) from e

    def close(self) -> None:
        """Close the underlying file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def _read_header(self) -> None:
        header = self._next_line()
        if header is None:
            raise PersistenceError(f"Results file '{self._path}' is empty")
        if header != RESULTS_HEADER:
            raise PersistenceError(
                f"Unsupported results format in '{self._path}': {header!r} "
                f"(expected {RESULTS_HEADER!r})"
            )

    def _next_line(self) -> Optional[str]:
        if self._file is None:
            raise PersistenceError("Results reader is not open")
        try:
            line = self._file.readline()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(
                f"Cannot read results file '{self._path}': {e}"
            ) from e
        if not line:
            return None
        self._line_number += 1
        return line[:-1] if line.endswith("\n") else line


def write_settings(path: Path, settings: RunSettings) -> None:
    """Write run settings as a properties file.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    lines = [
        "# license-validator settings",
        f"{FORMAT_VERSION_KEY}={RESULTS_FORMAT_VERSION}",
    ]
    for key, attr in SETTINGS_KEYS.items():
        lines.append(f"{key}={'true' if getattr(settings, attr) else 'false'}")
    try:
        path.write_text("\n".join(lines) + "\n", encoding=ENCODING)
    except (OSError, UnicodeEncodeError) as e:
        raise PersistenceError(f"Cannot write settings file '{path}': {e}") from e


def read_settings(path: Path) -> RunSettings:
    """Read run settings from a properties file.

    Blank lines and ``#``/``!`` comments are ignored, as are unknown keys.
    A missing boolean key reads as ``true``.

    Raises:
        PersistenceError: If the file cannot be read or is malformed.
    """
    try:
        content = path.read_text(encoding=ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Cannot read settings file '{path}': {e}") from e

    values: dict[str, str] = {}
    for number, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(("#", "!")):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            raise PersistenceError(
                f"Malformed settings in '{path}' line {number}: {raw_line!r}"
            )
        values[key.strip()] = value.strip()

    version = values.get(FORMAT_VERSION_KEY)
    if version is not None and version != str(RESULTS_FORMAT_VERSION):
        raise PersistenceError(
            f"Unsupported settings format version {version!r} in '{path}'"
        )

    fields: dict[str, bool] = {}
    for key, attr in SETTINGS_KEYS.items():
        text = values.get(key, "true")
        if text.lower() not in ("true", "false"):
            raise PersistenceError(
                f"Invalid value for '{key}' in '{path}': {text!r}"
            )
        fields[attr] = text.lower() == "true"
    return RunSettings(**fields)


class ResultsStore:
    """Settings and results files in one results directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @property
    def settings_file(self) -> Path:
        return self.directory / SETTINGS_FILE_NAME

    @property
    def results_file(self) -> Path:
        return self.directory / RESULTS_FILE_NAME

    def exists(self) -> bool:
        """True if both files are present."""
        return self.settings_file.is_file() and self.results_file.is_file()

    def clear(self) -> None:
        """Remove results of a previous run.

        Raises:
            PersistenceError: If a file cannot be removed.
        """
        for path in (self.settings_file, self.results_file):
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise PersistenceError(f"Cannot remove '{path}': {e}") from e

    def write(self, settings: RunSettings, results: Iterable[ValidationResult]) -> int:
        """Persist settings and results.

        Results are written to a temporary file that replaces the results
        file only once complete.

        Returns:
            Number of records written.

        Raises:
            PersistenceError: If the directory or files cannot be written.
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                f"Cannot create results directory '{self.directory}': {e}"
            ) from e

        temp_file = self.results_file.with_name(self.results_file.name + ".tmp")
        try:
            with ResultsWriter(temp_file) as writer:
                for result in results:
                    writer.write(result)
            write_settings(self.settings_file, settings)
            temp_file.replace(self.results_file)
        except OSError as e:
            raise PersistenceError(
                f"Cannot write results file '{self.results_file}': {e}"
            ) from e
        finally:
            temp_file.unlink(missing_ok=True)

        log.info(
            "results written",
            directory=str(self.directory),
            records=writer.count,
        )
        return writer.count

    def read_settings(self) -> RunSettings:
        """Read the persisted run settings."""
        return read_settings(self.settings_file)

    def read_results(self) -> list[ValidationResult]:
        """Read all persisted results, collapsing duplicate keys.

        The first record for a (coordinate, original license name) key wins.
        """
        index = self.read_index()
        return index.all_results()

    def read_index(self) -> ResultsIndex:
        """Read persisted results into a ResultsIndex."""
        index = ResultsIndex()
        with ResultsReader(self.results_file) as reader:
            for result in reader:
                if not index.add(result):
                    log.debug(
                        "duplicate result skipped",
                        artifact=str(result.artifact),
                        license=result.original_license_name,
                    )
        log.info("results read", directory=str(self.directory), records=len(index))
        return index

    def read(self) -> tuple[RunSettings, list[ValidationResult]]:
        """Read settings and deduplicated results."""
        return self.read_settings(), self.read_results()
