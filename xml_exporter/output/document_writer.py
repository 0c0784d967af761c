"""
Sinks for the serialized document.

Writers are append-only: fragments are written in the order received and
nothing already written is rolled back when a run aborts.
"""

import io
import logging

from pathlib import Path
from typing import List, Optional, Union

from ..exceptions import SinkWriteError
from ..interfaces import DocumentWriterInterface


class FileDocumentWriter(DocumentWriterInterface):
    """
    Writes the document to a file, opened for the duration of one run.
    
    Every OSError raised while opening, writing or closing the file is
    re-raised as SinkWriteError carrying the file path.
    """
    
    def __init__(self, path: Union[str, Path], encoding: str = "utf-8", create_dirs: bool = False):
        """
        Initialize the file writer.
        
        Args:
            path: Output file path; an existing file is overwritten
            encoding: Text encoding for the file
            create_dirs: Create missing parent directories on open
        """
        self.path = Path(path)
        self.encoding = encoding
        self.create_dirs = create_dirs
        self.logger = logging.getLogger(__name__)
        self._file: Optional[io.TextIOBase] = None
        self.chars_written = 0
    
    def open(self) -> None:
        if self._file is not None:
            return
        try:
            if self.create_dirs:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, 'w', encoding=self.encoding, newline='\n')
        except OSError as e:
            raise SinkWriteError(f"Cannot open output file {self.path}: {e}", str(self.path)) from e
        self.logger.debug(f"Opened output file {self.path}")
    
    def write(self, text: str) -> None:
        if self._file is None:
            raise SinkWriteError(f"Output file {self.path} is not open", str(self.path))
        try:
            self._file.write(text)
        except (OSError, UnicodeEncodeError) as e:
            raise SinkWriteError(f"Failed writing to {self.path}: {e}", str(self.path)) from e
        self.chars_written += len(text)
    
    def close(self) -> None:
        if self._file is None:
            return
        file, self._file = self._file, None
        try:
            file.close()
        except OSError as e:
            raise SinkWriteError(f"Failed closing {self.path}: {e}", str(self.path)) from e
        self.logger.debug(f"Closed output file {self.path} ({self.chars_written} characters written)")


class StringDocumentWriter(DocumentWriterInterface):
    """In-memory writer; the document is available from ``getvalue()``."""
    
    def __init__(self):
        self._parts: List[str] = []
        self.closed = False
    
    def open(self) -> None:
        self.closed = False
    
    def write(self, text: str) -> None:
        self._parts.append(text)
    
    def close(self) -> None:
        self.closed = True
    
    def getvalue(self) -> str:
        return ''.join(self._parts)
