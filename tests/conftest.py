import io

import docx
import pytest
from fastapi.testclient import TestClient
from reportlab.pdfgen import canvas

from resume_review.config import Settings
from resume_review.main import create_app
from resume_review.reviewer import ResumeReviewer


class FakeReviewer(ResumeReviewer):
    name = "fake"

    def __init__(self, analysis="## Overall Impression\nSolid resume.", error=None, on_review=None):
        self.analysis = analysis
        self.error = error
        self.on_review = on_review
        self.calls = []

    def review(self, resume_text):
        self.calls.append(resume_text)
        if self.on_review is not None:
            self.on_review()
        if self.error is not None:
            raise self.error
        return self.analysis


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(tmp_path, upload_dir):
    return Settings(
        upload_dir=str(upload_dir),
        frontend_dir=str(tmp_path / "frontend"),
        images_dir=str(tmp_path / "images"),
    )


@pytest.fixture
def reviewer():
    return FakeReviewer()


@pytest.fixture
def client(settings, reviewer):
    return TestClient(create_app(settings, reviewer=reviewer))


@pytest.fixture
def stored_files(upload_dir):
    def _list():
        if not upload_dir.exists():
            return []
        return sorted(p.name for p in upload_dir.iterdir())

    return _list


@pytest.fixture
def make_pdf():
    def _make(*lines):
        buf = io.BytesIO()
        c = canvas.Canvas(buf)
        y = 800
        for line in lines:
            c.drawString(72, y, line)
            y -= 16
        c.showPage()
        c.save()
        return buf.getvalue()

    return _make


@pytest.fixture
def make_docx():
    def _make(*paragraphs, table=None):
        document = docx.Document()
        for text in paragraphs:
            document.add_paragraph(text)
        if table:
            t = document.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    t.cell(r, c).text = value
        buf = io.BytesIO()
        document.save(buf)
        return buf.getvalue()

    return _make


@pytest.fixture
def make_reviewer():
    return FakeReviewer
