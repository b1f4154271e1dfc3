"""Grading endpoints."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from rubricscore.ai.openai_client import ModelClient, get_model_client
from rubricscore.errors import FileTooLarge, MissingInput, RubricScoreError
from rubricscore.pipeline.extract import extract_document
from rubricscore.pipeline.grade import grade_assignment
from rubricscore.pipeline.text import normalize_text
from rubricscore.schemas import ErrorResponse, ExtractedTexts, FinalReport
from rubricscore.settings import settings

router = APIRouter(tags=["grading"])
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _has_upload(upload: UploadFile | None) -> bool:
    return upload is not None and bool(upload.filename)


def _read_upload(upload: UploadFile, field: str) -> bytes:
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    if size > settings.max_upload_bytes:
        raise FileTooLarge(f"{field} file size must be {settings.max_upload_mb}MB or less", field=field)
    return upload.file.read()


def resolve_text_input(field: str, upload: UploadFile | None, text: str | None) -> str:
    """Return normalized text from exactly one of an uploaded document or pasted text."""

    has_file = _has_upload(upload)
    has_text = bool(text and text.strip())
    if has_file and has_text:
        raise MissingInput(f"Provide either a {field} file or {field} text, not both", field=field)
    if not has_file and not has_text:
        raise MissingInput(f"A {field} file or pasted {field} text is required", field=field)

    if upload is not None and has_file:
        return extract_document(upload.filename or "", _read_upload(upload, field), field=field)
    return normalize_text(text or "")


def _err(exc: RubricScoreError, request_id: str, stage: str) -> JSONResponse:
    payload = ErrorResponse(detail=exc.detail, error=exc.code, field=exc.field, request_id=request_id, stage=stage)
    return JSONResponse(status_code=exc.status_code, content=payload.model_dump())


def _unexpected(exc: Exception, request_id: str, stage: str) -> JSONResponse:
    logger.exception("grade request failed", extra={"request_id": request_id, "stage": stage})
    payload = ErrorResponse(
        detail=f"Grading failed: {type(exc).__name__}",
        error="INTERNAL_ERROR",
        request_id=request_id,
        stage=stage,
    )
    return JSONResponse(status_code=500, content=payload.model_dump())


@router.post("/grade", response_model=FinalReport, responses=_ERROR_RESPONSES)
def grade(
    rubric: UploadFile | None = File(default=None),
    rubric_text: str | None = Form(default=None),
    assignment: UploadFile | None = File(default=None),
    assignment_text: str | None = Form(default=None),
    title: str | None = Form(default=None),
    client: ModelClient = Depends(get_model_client),
) -> FinalReport | JSONResponse:
    request_id = str(uuid.uuid4())
    stage = "read_rubric"
    try:
        rubric_content = resolve_text_input("rubric", rubric, rubric_text)
        stage = "read_assignment"
        assignment_content = resolve_text_input("assignment", assignment, assignment_text)

        stage = "grade"
        logger.info(
            "grade begin",
            extra={
                "request_id": request_id,
                "stage": stage,
                "rubric_chars": len(rubric_content),
                "assignment_chars": len(assignment_content),
            },
        )
        return grade_assignment(
            client,
            rubric_content,
            assignment_content,
            title=(title or "").strip() or None,
            request_id=request_id,
        )
    except RubricScoreError as exc:
        return _err(exc, request_id, stage)
    except Exception as exc:
        return _unexpected(exc, request_id, stage)


@router.post("/extract", response_model=ExtractedTexts, responses=_ERROR_RESPONSES)
def extract(
    rubric: UploadFile | None = File(default=None),
    rubric_text: str | None = Form(default=None),
    assignment: UploadFile | None = File(default=None),
    assignment_text: str | None = Form(default=None),
) -> ExtractedTexts | JSONResponse:
    request_id = str(uuid.uuid4())
    stage = "read_rubric"
    try:
        rubric_content = resolve_text_input("rubric", rubric, rubric_text)
        stage = "read_assignment"
        assignment_content = resolve_text_input("assignment", assignment, assignment_text)
    except RubricScoreError as exc:
        return _err(exc, request_id, stage)
    except Exception as exc:
        return _unexpected(exc, request_id, stage)
    return ExtractedTexts(rubric_text=rubric_content, assignment_text=assignment_content)
