from __future__ import annotations

from typing import List

import pytest

from resume_insight.cv_pipeline.batch_orchestrator import BatchOrchestrator, process_upload
from resume_insight.errors import (
    BatchRunError,
    EmptyArchiveError,
    InvalidArchiveError,
    ServiceNotConfiguredError,
    UnsupportedInputError,
)
from resume_insight.schemas.batch import DocumentStage, ProcessingState, RunSnapshot
from resume_insight.schemas.document import UploadedFile
from resume_insight.services import extraction_service
from tests.conftest import FakeExtractionService, make_docx, make_zip, response_for

S = ProcessingState


def _zip_upload(members: dict, name: str = "resumes.zip") -> UploadedFile:
    return UploadedFile(name=name, content=make_zip(members), content_type="application/zip")


@pytest.mark.asyncio
async def test_empty_document_in_the_middle_is_isolated() -> None:
    upload = _zip_upload(
        {
            "one.docx": make_docx("Person One"),
            "two.docx": make_docx(),
            "three.docx": make_docx("Person Three"),
        }
    )
    service = FakeExtractionService([response_for("Person One"), response_for("Person Three")])
    snapshots: List[RunSnapshot] = []

    result = await BatchOrchestrator(service, on_progress=snapshots.append).run(upload)

    assert [r.source_name for r in result.records] == ["one.docx", "three.docx"]
    assert [r.full_name for r in result.records] == ["Person One", "Person Three"]
    assert result.failures == {"two.docx": "Could not extract text or file is empty."}
    assert result.attempted == 3
    assert [s.state for s in snapshots] == [
        S.PARSING_INPUT,
        S.PARSING_FILE,
        S.CALLING_SERVICE,
        S.PARSING_FILE,
        S.PARSING_FILE,
        S.CALLING_SERVICE,
        S.CALLING_SERVICE,
        S.SUCCESS,
    ]


@pytest.mark.asyncio
async def test_progress_reports_one_document_at_a_time() -> None:
    upload = _zip_upload({"a.docx": make_docx("A"), "b.docx": make_docx("B")})
    snapshots: List[RunSnapshot] = []

    await BatchOrchestrator(FakeExtractionService(), on_progress=snapshots.append).run(upload)

    per_document = [s.progress for s in snapshots if s.state in (S.PARSING_FILE, S.CALLING_SERVICE)]
    assert [(p.current_document, p.stage, p.processed, p.total) for p in per_document] == [
        ("a.docx", DocumentStage.EXTRACTING_TEXT, 0, 2),
        ("a.docx", DocumentStage.QUERYING_SERVICE, 0, 2),
        ("b.docx", DocumentStage.EXTRACTING_TEXT, 1, 2),
        ("b.docx", DocumentStage.QUERYING_SERVICE, 1, 2),
        ("b.docx", None, 2, 2),
    ]
    assert snapshots[-1].state is S.SUCCESS
    assert snapshots[-1].progress is None


@pytest.mark.asyncio
async def test_archive_without_supported_files_ends_in_error() -> None:
    upload = _zip_upload({"readme.txt": b"hello", "img/": b""})
    service = FakeExtractionService()
    snapshots: List[RunSnapshot] = []
    orchestrator = BatchOrchestrator(service, on_progress=snapshots.append)

    with pytest.raises(EmptyArchiveError):
        await orchestrator.run(upload)

    assert orchestrator.state is S.ERROR
    assert "no supported resume files" in orchestrator.error
    assert [s.state for s in snapshots] == [S.PARSING_INPUT, S.ERROR]
    assert snapshots[-1].error == orchestrator.error
    assert service.calls == []


@pytest.mark.asyncio
async def test_single_file_is_a_batch_of_one() -> None:
    upload = UploadedFile(name="cv.docx", content=make_docx("Solo Person"))
    result = await process_upload(upload, FakeExtractionService([response_for("Solo Person")]))

    assert len(result.records) == 1
    assert result.records[0].source_name == "cv.docx"
    assert result.failures == {}


@pytest.mark.asyncio
async def test_single_file_failure_is_a_failure_entry_not_a_run_error() -> None:
    upload = UploadedFile(
        name="empty.docx",
        content=make_docx(),
        content_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )
    orchestrator = BatchOrchestrator(FakeExtractionService())

    result = await orchestrator.run(upload)

    assert result.records == []
    assert list(result.failures) == ["empty.docx"]
    assert orchestrator.state is S.SUCCESS


@pytest.mark.asyncio
async def test_record_count_plus_failures_equals_documents() -> None:
    members = {f"cv{i}.docx": make_docx(f"Person {i}") for i in range(5)}
    members["broken.pdf"] = b"not a pdf"
    members["blank.docx"] = make_docx()
    service = FakeExtractionService(
        [
            response_for("Person 0"),
            "no json at all",
            response_for("Person 2"),
            "[]",
            response_for("Person 4"),
        ]
    )

    result = await BatchOrchestrator(service).run(_zip_upload(members))

    assert len(result.records) + len(result.failures) == len(members)
    assert [r.source_name for r in result.records] == ["cv0.docx", "cv2.docx", "cv4.docx"]
    assert set(result.failures) == {"cv1.docx", "cv3.docx", "broken.pdf", "blank.docx"}


@pytest.mark.asyncio
async def test_duplicate_failed_names_keep_separate_entries() -> None:
    upload = _zip_upload({"a/cv.docx": make_docx(), "b/cv.docx": make_docx()})
    result = await BatchOrchestrator(FakeExtractionService()).run(upload)
    assert len(result.failures) == 2


@pytest.mark.asyncio
async def test_unsupported_upload_is_a_run_error() -> None:
    orchestrator = BatchOrchestrator(FakeExtractionService())

    with pytest.raises(UnsupportedInputError):
        await orchestrator.run(UploadedFile(name="notes.txt", content=b"hi", content_type="text/plain"))
    assert orchestrator.state is S.ERROR


@pytest.mark.asyncio
async def test_invalid_zip_is_a_run_error() -> None:
    orchestrator = BatchOrchestrator(FakeExtractionService())

    with pytest.raises(InvalidArchiveError):
        await orchestrator.run(UploadedFile(name="broken.zip", content=b"nope"))
    assert orchestrator.state is S.ERROR


@pytest.mark.asyncio
async def test_missing_credential_is_a_run_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(extraction_service, "OPENAI_API_KEY", "")
    orchestrator = BatchOrchestrator()

    with pytest.raises(ServiceNotConfiguredError):
        await orchestrator.run(UploadedFile(name="cv.docx", content=make_docx("Someone")))
    assert orchestrator.state is S.ERROR
    assert "OPENAI_API_KEY" in orchestrator.error


@pytest.mark.asyncio
async def test_error_escaping_document_boundary_is_wrapped() -> None:
    def failing_observer(snapshot: RunSnapshot) -> None:
        if snapshot.state is S.PARSING_FILE:
            raise RuntimeError("observer crashed")

    orchestrator = BatchOrchestrator(FakeExtractionService(), on_progress=failing_observer)
    upload = _zip_upload({"a.docx": make_docx("A")})

    with pytest.raises(BatchRunError) as exc_info:
        await orchestrator.run(upload)
    assert "observer crashed" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert orchestrator.state is S.ERROR


@pytest.mark.asyncio
async def test_error_inside_document_boundary_is_a_failure_entry() -> None:
    def failing_observer(snapshot: RunSnapshot) -> None:
        if snapshot.state is S.CALLING_SERVICE and snapshot.progress.stage is DocumentStage.QUERYING_SERVICE:
            raise RuntimeError("observer crashed")

    orchestrator = BatchOrchestrator(FakeExtractionService(), on_progress=failing_observer)

    result = await orchestrator.run(_zip_upload({"a.docx": make_docx("A")}))

    assert result.failures == {"a.docx": "Failed to extract data: observer crashed"}
    assert orchestrator.state is S.SUCCESS


def test_run_sync_returns_the_batch_result() -> None:
    upload = UploadedFile(name="cv.docx", content=make_docx("Sync Person"))
    result = BatchOrchestrator(FakeExtractionService([response_for("Sync Person")])).run_sync(upload)
    assert result.records[0].full_name == "Sync Person"


@pytest.mark.asyncio
async def test_processed_count_reaches_total_before_success() -> None:
    upload = _zip_upload({"a.docx": make_docx("A"), "b.docx": make_docx(), "c.docx": make_docx("C")})
    snapshots: List[RunSnapshot] = []

    await BatchOrchestrator(FakeExtractionService(), on_progress=snapshots.append).run(upload)

    before_success = snapshots[-2]
    assert before_success.progress is not None
    assert before_success.progress.processed == before_success.progress.total == 3
    assert before_success.progress.stage is None
    assert max(s.progress.processed for s in snapshots if s.progress is not None) == 3
