"""
Document sources: the thin I/O layer in front of the vector engine.

Enumerates documents in a directory, opens them (transparently decompressing
``.bz2`` files) and extracts article text from MediaWiki XML dumps.
"""

import bz2
import io
import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, TextIO, Union

from .errors import DocumentReadError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


@dataclass(frozen=True)
class DocumentSource:
    """
    A document identifier paired with where its text comes from.

    Exactly one of ``path`` and ``text`` is set. Sources are plain data so
    they can be handed to worker processes.
    """
    identifier: str
    path: Optional[str] = None
    text: Optional[str] = None

    def __post_init__(self):
        if (self.path is None) == (self.text is None):
            raise ValueError("DocumentSource needs exactly one of path or text")

    @classmethod
    def from_text(cls, identifier: str, text: str) -> "DocumentSource":
        return cls(identifier=identifier, text=text)

    @classmethod
    def from_path(cls, path: Union[str, Path],
                  identifier: Optional[str] = None) -> "DocumentSource":
        return cls(identifier=identifier or str(path), path=str(path))

    def open(self, encoding: Optional[str] = None) -> TextIO:
        """Open the document as a text stream."""
        if self.text is not None:
            return io.StringIO(self.text)
        return open_document(self.path, encoding)


def open_document(path: Union[str, Path], encoding: Optional[str] = None) -> TextIO:
    """
    Open a document for reading, decompressing bzip2 files on the fly.

    Undecodable bytes become U+FFFD, which the tokenizer treats as a separator.
    """
    encoding = encoding or DEFAULT_ENCODING
    if str(path).endswith(".bz2"):
        return bz2.open(path, "rt", encoding=encoding, errors="replace")
    return open(path, "r", encoding=encoding, errors="replace")


def list_directory(data_dir: Union[str, Path]) -> List[DocumentSource]:
    """
    Enumerate the regular files of a directory as document sources.

    Identifiers are the directory path joined with the file name, sorted.

    Raises:
        DocumentReadError: If the directory cannot be listed
    """
    data_dir = Path(data_dir)
    try:
        entries = sorted(os.scandir(data_dir), key=lambda e: e.name)
    except OSError as e:
        raise DocumentReadError(
            f"Cannot list documents in {data_dir}: {e}",
            identifier=str(data_dir),
            reason=type(e).__name__
        ) from e

    sources = []
    for entry in entries:
        if not entry.is_file():
            logger.debug(f"Skipping non-file entry {entry.path}")
            continue
        sources.append(DocumentSource.from_path(data_dir / entry.name))

    logger.info(f"Found {len(sources)} documents in {data_dir}")
    return sources


def _local_name(tag: str) -> str:
    """Strip an XML namespace from a tag."""
    return tag.rsplit("}", 1)[-1]


def iter_wiki_articles(path: Union[str, Path],
                       limit: Optional[int] = None) -> Iterator[DocumentSource]:
    """
    Stream the articles of a MediaWiki XML dump.

    Args:
        path: Dump file, optionally bzip2 compressed
        limit: Stop after this many articles

    Yields:
        One DocumentSource per page, identified by its title

    Raises:
        DocumentReadError: If the dump cannot be opened or parsed
    """
    opener = bz2.open if str(path).endswith(".bz2") else open
    count = 0
    try:
        with opener(path, "rb") as raw:
            title, text = "", ""
            root = None
            for event, element in ET.iterparse(raw, events=("start", "end")):
                if event == "start":
                    if root is None:
                        root = element
                    continue
                name = _local_name(element.tag)
                if name == "title":
                    title = element.text or ""
                elif name == "text":
                    text = element.text or ""
                elif name == "page":
                    if title:
                        yield DocumentSource.from_text(title, text)
                        count += 1
                    title, text = "", ""
                    root.clear()
                    if limit is not None and count >= limit:
                        break
    except (OSError, EOFError, ET.ParseError) as e:
        raise DocumentReadError(
            f"Cannot read wiki dump {path}: {e}",
            identifier=str(path),
            reason=type(e).__name__
        ) from e

    logger.info(f"Extracted {count} articles from {path}")
