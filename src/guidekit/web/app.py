"""FastAPI application backing the guidekit preview."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from guidekit.index.toc import TocBuilder, render_markdown
from guidekit.index.validation import validate
from guidekit.models import Document
from guidekit.web.dependencies import CONTENT_DIR_ENV, load_collection
from guidekit.web.frontend import router as frontend_router

__all__ = ["app", "CONTENT_DIR_ENV"]

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="guidekit preview", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)


class QuestionModel(BaseModel):
    text: str
    anchor: str


class SectionModel(BaseModel):
    title: str
    level: int
    anchor: str


class DocumentSummary(BaseModel):
    slug: str
    title: str
    order: Optional[float] = None
    question_count: int
    previous: Optional[str] = None
    next: Optional[str] = None


class DocumentDetail(DocumentSummary):
    front_matter: Dict[str, Any]
    sections: List[SectionModel]
    questions: List[QuestionModel]


class IssueModel(BaseModel):
    code: str
    message: str
    path: str
    severity: str


class TopicModel(BaseModel):
    title: str
    count: int
    document_slug: Optional[str] = None
    questions: List[QuestionModel]


class TopicsResponse(BaseModel):
    title: str
    question_count: int
    topics: List[TopicModel]


class CheckResponse(BaseModel):
    ok: bool
    errors: int
    warnings: int
    issues: List[IssueModel]


def _summary(document: Document) -> DocumentSummary:
    return DocumentSummary(
        slug=document.slug,
        title=document.title,
        order=document.order,
        question_count=len(document.questions),
        previous=document.nav.previous,
        next=document.nav.next,
    )


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/documents")
async def list_documents(content_dir: Path | None = None) -> dict[str, Any]:
    """List the guide's documents in reading order."""
    collection, stats, _ = load_collection(content_dir)
    documents = [_summary(document) for document in collection]
    return {
        "documents": documents,
        "stats": {
            "document_count": len(collection),
            "question_count": sum(len(document.questions) for document in collection),
            "failed": stats.failed,
        },
    }


@app.get("/documents/{slug:path}")
async def get_document(slug: str, content_dir: Path | None = None) -> DocumentDetail:
    """Return one document's structure."""
    collection, _, _ = load_collection(content_dir)
    document = collection.find(slug)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Document not found: {slug}")

    summary = _summary(document)
    return DocumentDetail(
        **summary.model_dump(),
        front_matter=document.front_matter,
        sections=[
            SectionModel(title=section.title, level=section.level, anchor=section.anchor)
            for section in document.sections
        ],
        questions=[
            QuestionModel(text=question.text, anchor=question.anchor)
            for question in document.questions
        ],
    )


@app.get("/topics")
async def list_topics(content_dir: Path | None = None) -> TopicsResponse:
    """Return the question index as JSON for the preview page."""
    collection, _, config = load_collection(content_dir)
    table_of_contents = TocBuilder.from_collection(collection, title=config.index_title)
    return TopicsResponse(
        title=table_of_contents.title,
        question_count=table_of_contents.question_count,
        topics=[
            TopicModel(
                title=topic.title,
                count=topic.count,
                document_slug=topic.document_slug,
                questions=[
                    QuestionModel(text=question.text, anchor=question.anchor)
                    for question in topic.questions
                ],
            )
            for topic in table_of_contents.topics
        ],
    )


@app.get("/toc", response_class=PlainTextResponse)
async def get_toc(content_dir: Path | None = None, link_suffix: str | None = None) -> str:
    """Render the question index as Markdown."""
    collection, _, config = load_collection(content_dir)
    table_of_contents = TocBuilder.from_collection(collection, title=config.index_title)
    return render_markdown(table_of_contents, link_suffix=link_suffix or config.link_suffix)


@app.get("/check")
async def check_guide(content_dir: Path | None = None) -> CheckResponse:
    """Run the navigation and index checks."""
    collection, _, config = load_collection(content_dir)
    index_path = config.resolve_index_path()
    index_text = index_path.read_text(encoding="utf-8") if index_path.exists() else None
    report = validate(collection, index_text, index_path.name)
    return CheckResponse(
        ok=report.ok,
        errors=len(report.errors),
        warnings=len(report.warnings),
        issues=[
            IssueModel(
                code=issue.code, message=issue.message, path=issue.path, severity=issue.severity
            )
            for issue in report.issues
        ],
    )
