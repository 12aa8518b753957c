"""Output sinks writing exported rows as semicolon-delimited CSV."""

import csv
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import IO, Self

from src.export.errors import SerializationError, SinkCreationError
from src.export.models import ExportConfig, ExportRecord
from src.helpers.constants import CSV_DELIMITER
from src.helpers.logging import get_logger


logger = get_logger(__name__)

HEADER = list(ExportRecord.model_fields)


class Sink(ABC):
    """Destination for exported rows.

    The header row is written lazily, right before the first data row.
    Sinks are context managers; leaving the block closes the sink whether
    or not the export succeeded.
    """

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream
        self._writer = csv.writer(
            stream, delimiter=CSV_DELIMITER, lineterminator="\n"
        )
        self.rows_written = 0

    @property
    @abstractmethod
    def destination(self) -> str:
        """Human readable name of where rows go."""

    def serialize(self, record: ExportRecord) -> None:
        """Write one record as a row.

        Raises:
            SerializationError: If the underlying stream rejects the write
        """
        try:
            if self.rows_written == 0:
                self._writer.writerow(HEADER)
            self._writer.writerow(record.model_dump().values())
        except (OSError, csv.Error) as e:
            msg = f"Failed to write row for block {record.block_num} to {self.destination}: {e}"
            raise SerializationError(msg) from e
        self.rows_written += 1

    @abstractmethod
    def close(self) -> None:
        """Flush pending rows and release the destination."""

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
            return
        # Keep the error that aborted the run; a failed close is secondary
        try:
            self.close()
        except SerializationError as e:
            logger.warning("%s", e)


class FileSink(Sink):
    """Writes rows to a newly created UTF-8 file."""

    def __init__(self, path: Path) -> None:
        """Create (or truncate) the output file.

        Args:
            path: File to write; its parent directory must exist

        Raises:
            SinkCreationError: If the file cannot be opened for writing
        """
        self.path = Path(path)
        try:
            handle = self.path.open("w", encoding="utf-8", newline="")
        except OSError as e:
            raise SinkCreationError(self.path, str(e)) from e
        super().__init__(handle)
        logger.info("Writing rows to %s", self.path)

    @property
    def destination(self) -> str:
        return str(self.path)

    def close(self) -> None:
        if self._stream.closed:
            return
        try:
            self._stream.close()
        except OSError as e:
            msg = f"Failed to flush {self.path}: {e}"
            raise SerializationError(msg) from e


class StreamSink(Sink):
    """Writes rows to an already open text stream, standard output by default."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        super().__init__(stream if stream is not None else sys.stdout)

    @property
    def destination(self) -> str:
        return "STDOUT" if self._stream is sys.stdout else repr(self._stream)

    def close(self) -> None:
        # The process owns stdout; flush only
        try:
            self._stream.flush()
        except OSError as e:
            msg = f"Failed to flush {self.destination}: {e}"
            raise SerializationError(msg) from e


def create_sink(config: ExportConfig) -> Sink:
    """Pick the sink for a run.

    Raises:
        SinkCreationError: If the output file cannot be created
    """
    if config.stdout:
        return StreamSink()
    return FileSink(config.output_path)


__all__ = ["HEADER", "FileSink", "Sink", "StreamSink", "create_sink"]
