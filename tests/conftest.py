from __future__ import annotations

import io
import json
import zipfile
from typing import Any, Dict, List, Optional, Union

import pytest
from docx import Document as DocxDocument

from resume_insight.services.extraction_service import ExtractionService


class FakeExtractionService(ExtractionService):
    """Replays canned replies (or raises canned errors) in call order."""

    def __init__(self, replies: Optional[List[Union[str, Exception]]] = None, default: str = "{}") -> None:
        self.replies = list(replies or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    async def generate(self, system_prompt: str, user_content: str, json_output: bool = True) -> str:
        self.calls.append(
            {"system_prompt": system_prompt, "user_content": user_content, "json_output": json_output}
        )
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_docx(*paragraphs: str) -> bytes:
    doc = DocxDocument()
    for text in paragraphs:
        doc.add_paragraph(text)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def make_zip(members: Dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in members.items():
            if name.endswith("/"):
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return buf.getvalue()


def response_for(name: str, **extra: Any) -> str:
    body = {
        "Full Name": name,
        "Email": f"{name.lower().replace(' ', '.')}@example.com",
        "Phone Number": None,
        "ATS Score": 70,
        "Work Experience": [],
    }
    body.update(extra)
    return json.dumps(body)


@pytest.fixture
def fake_service() -> FakeExtractionService:
    return FakeExtractionService()
