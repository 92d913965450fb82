"""
Expansion endpoints for ASA/PIX configurations.

- POST /api/v1/expand/          multipart upload -> JSON
- POST /api/v1/expand/text      JSON body -> JSON
- POST /api/v1/expand/download  multipart upload -> text/plain attachment
"""
import io
import logging
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, HTTPException, status
from fastapi.responses import StreamingResponse

from asa_expander.core.auth import verify_api_key
from asa_expander.core.config import settings
from asa_expander.core.exceptions import ConfigExpansionError
from asa_expander.schemas.expansion import ExpandOptions, ExpandResponse, ExpandTextRequest, ExpansionStats
from asa_expander.services.pretty_service import ConfigPrettyPrinter, PrettyResult
from asa_expander.utils.version_detector import looks_like_asa_config

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTENSIONS = (".txt", ".cfg", ".conf")


def _render(content: str, options: ExpandOptions) -> PrettyResult:
    if not content.strip():
        raise ValueError("Configuration is empty")
    if not looks_like_asa_config(content):
        raise ValueError("Could not detect a Cisco ASA/PIX configuration")
    printer = ConfigPrettyPrinter(**options.model_dump())
    return printer.render(content)


def _to_response(result: PrettyResult, filename: Optional[str]) -> ExpandResponse:
    return ExpandResponse(
        filename=filename,
        content=result.text,
        lines=result.lines,
        stats=ExpansionStats(
            version=result.version,
            pre83=result.pre83,
            input_lines=result.input_lines,
            output_lines=len(result.lines),
            catalog_size=result.catalog_size,
            expanded_entries=result.expanded_entries,
            generated_lines=result.generated_lines,
        ),
    )


async def _read_upload(file: UploadFile) -> str:
    filename = file.filename or ""
    if not filename.lower().endswith(ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only {', '.join(ALLOWED_EXTENSIONS)} files are supported"
        )

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_SIZE} bytes"
        )
    return content.decode("utf-8", errors="ignore")


def _handle_failure(e: Exception, context: str) -> HTTPException:
    """Map a failure during expansion to the HTTP error returned to the client."""
    if isinstance(e, ConfigExpansionError):
        logger.error(f"Expansion failed for {context}: {e}")
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if isinstance(e, ValueError):
        logger.error(f"Validation error for {context}: {e}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    error_type = type(e).__name__
    logger.error(f"Error expanding {context} (type: {error_type}): {e}", exc_info=True)
    if settings.DEBUG:
        detail = f"Failed to expand configuration: {error_type}: {e}"
    else:
        detail = "Failed to expand configuration. Check server logs for details."
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.post("/", response_model=ExpandResponse)
async def expand_config_file(
    file: UploadFile = File(...),
    substitute_names: Optional[bool] = Form(None, description="Replace 'name' definitions with addresses"),
    group_commands: Optional[bool] = Form(None, description="Insert '!' separators between command groups"),
    annotate_nat: Optional[bool] = Form(None, description="Annotate nat commands with their objects"),
    expand_access_lists: Optional[bool] = Form(None, description="Expand access-lists that reference objects"),
    api_key: Optional[str] = Depends(verify_api_key),
):
    """
    Upload an ASA/PIX configuration and return it with all objects expanded.
    """
    try:
        content = await _read_upload(file)
        options = ExpandOptions(
            substitute_names=substitute_names,
            group_commands=group_commands,
            annotate_nat=annotate_nat,
            expand_access_lists=expand_access_lists,
        )
        result = _render(content, options)
        logger.info(
            f"Config expanded: filename='{file.filename}', "
            f"expanded_entries={result.expanded_entries}, generated_lines={result.generated_lines}"
        )
        return _to_response(result, file.filename)
    except HTTPException:
        raise
    except Exception as e:
        raise _handle_failure(e, f"upload '{file.filename}'")


@router.post("/text", response_model=ExpandResponse)
async def expand_config_text(
    request: ExpandTextRequest,
    api_key: Optional[str] = Depends(verify_api_key),
):
    """Expand configuration text sent in a JSON body."""
    try:
        result = _render(request.content, request.options)
        return _to_response(result, request.filename)
    except Exception as e:
        raise _handle_failure(e, "text request")


@router.post("/download")
async def download_expanded_config(
    file: UploadFile = File(...),
    api_key: Optional[str] = Depends(verify_api_key),
):
    """Upload a configuration and download the expanded version as plain text."""
    try:
        content = await _read_upload(file)
        result = _render(content, ExpandOptions())
    except HTTPException:
        raise
    except Exception as e:
        raise _handle_failure(e, f"download '{file.filename}'")

    stem = (file.filename or "config").rsplit(".", 1)[0]
    filename = f"{stem}.expanded.txt"
    return StreamingResponse(
        io.BytesIO(result.text.encode("utf-8")),
        media_type="text/plain",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )
