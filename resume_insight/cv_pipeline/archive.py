"""Expand a ZIP upload into the resume documents it contains."""

import asyncio
import zipfile
from io import BytesIO
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from resume_insight.config import ARCHIVE_CONCURRENCY
from resume_insight.errors import EmptyArchiveError, InvalidArchiveError
from resume_insight.schemas.document import Document, MediaType
from resume_insight.utils.helpers import media_type_for_filename
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)


class ArchiveExpansion(BaseModel):
    """Documents unpacked from an archive plus members that failed to decompress."""

    documents: List[Document] = Field(default_factory=list)
    errors: Dict[str, str] = Field(default_factory=dict)
    skipped: List[str] = Field(default_factory=list, description="Members with unsupported suffixes")


def _read_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    return archive.read(info)


async def expand_archive(content: bytes, max_concurrent: int = ARCHIVE_CONCURRENCY) -> ArchiveExpansion:
    """
    Unpack supported members (.pdf, .docx) of a ZIP blob, decompressing them concurrently.

    Directory entries are ignored and other suffixes are skipped with a log line.
    A member that fails to decompress is recorded in ``errors``; the rest still
    expand. Documents keep archive order. Raises EmptyArchiveError when nothing
    qualifying was unpacked and InvalidArchiveError when the blob is not a ZIP.
    """
    try:
        archive = zipfile.ZipFile(BytesIO(content))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
        raise InvalidArchiveError(f"Could not read ZIP file: {e}") from e

    sem = asyncio.Semaphore(max_concurrent)

    async def read_with_sem(
        info: zipfile.ZipInfo, media_type: MediaType
    ) -> Tuple[str, MediaType, Optional[bytes], Optional[str]]:
        async with sem:
            try:
                data = await asyncio.to_thread(_read_member, archive, info)
                return (info.filename, media_type, data, None)
            except Exception as e:
                logger.warning("Could not extract %s from ZIP: %s", info.filename, e)
                return (info.filename, media_type, None, str(e))

    expansion = ArchiveExpansion()
    with archive:
        tasks = []
        for info in archive.infolist():
            if info.is_dir():
                continue
            media_type = media_type_for_filename(info.filename)
            if media_type is None:
                logger.info("Skipping unsupported file in ZIP: %s", info.filename)
                expansion.skipped.append(info.filename)
                continue
            tasks.append(read_with_sem(info, media_type))
        results = await asyncio.gather(*tasks)

    for name, media_type, data, error in results:
        if error is not None:
            expansion.errors[name] = error
            continue
        expansion.documents.append(Document(name=name, content=data, media_type=media_type))

    logger.info(
        "Archive expanded: documents=%s skipped=%s errors=%s",
        len(expansion.documents),
        len(expansion.skipped),
        len(expansion.errors),
    )
    if not expansion.documents:
        raise EmptyArchiveError()
    return expansion
