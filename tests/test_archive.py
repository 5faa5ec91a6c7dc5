from __future__ import annotations

import zipfile

import pytest

from resume_insight.cv_pipeline import archive
from resume_insight.cv_pipeline.archive import expand_archive
from resume_insight.errors import EmptyArchiveError, InvalidArchiveError
from resume_insight.schemas.document import MediaType
from tests.conftest import make_zip


@pytest.mark.asyncio
async def test_expands_supported_members_in_archive_order() -> None:
    blob = make_zip(
        {
            "resumes/": b"",
            "resumes/b.PDF": b"%PDF-b",
            "notes.txt": b"ignore me",
            "resumes/a.docx": b"docx-a",
            "c.pdf": b"%PDF-c",
        }
    )

    expansion = await expand_archive(blob, max_concurrent=2)

    assert [d.name for d in expansion.documents] == ["resumes/b.PDF", "resumes/a.docx", "c.pdf"]
    assert [d.media_type for d in expansion.documents] == [MediaType.PDF, MediaType.DOCX, MediaType.PDF]
    assert expansion.documents[0].content == b"%PDF-b"
    assert expansion.skipped == ["notes.txt"]
    assert expansion.errors == {}


@pytest.mark.asyncio
async def test_member_failure_is_recorded_without_aborting(monkeypatch: pytest.MonkeyPatch) -> None:
    real_read = archive._read_member

    def flaky_read(zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        if info.filename == "broken.pdf":
            raise zipfile.BadZipFile("Bad CRC-32 for file 'broken.pdf'")
        return real_read(zf, info)

    monkeypatch.setattr(archive, "_read_member", flaky_read)
    blob = make_zip({"ok.pdf": b"%PDF-ok", "broken.pdf": b"%PDF-x", "ok2.docx": b"docx"})

    expansion = await expand_archive(blob)

    assert [d.name for d in expansion.documents] == ["ok.pdf", "ok2.docx"]
    assert list(expansion.errors) == ["broken.pdf"]
    assert "Bad CRC-32" in expansion.errors["broken.pdf"]


@pytest.mark.asyncio
async def test_archive_without_supported_members_is_empty() -> None:
    blob = make_zip({"folder/": b"", "cover.txt": b"hi", "photo.png": b"\x89PNG"})

    with pytest.raises(EmptyArchiveError) as exc_info:
        await expand_archive(blob)
    assert "no supported resume files" in exc_info.value.message


@pytest.mark.asyncio
async def test_archive_with_only_failed_members_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    def always_fail(zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        raise OSError("disk error")

    monkeypatch.setattr(archive, "_read_member", always_fail)

    with pytest.raises(EmptyArchiveError):
        await expand_archive(make_zip({"a.pdf": b"%PDF"}))


@pytest.mark.asyncio
async def test_unreadable_blob_is_invalid_archive() -> None:
    with pytest.raises(InvalidArchiveError):
        await expand_archive(b"PK but not really a zip")
