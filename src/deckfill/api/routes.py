"""API routes for DeckFill."""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from ..engine import PPTX_MEDIA_TYPE, DeckGenerator
from ..mapping import DEFAULT_MAPPING_SET, list_mapping_sets

router = APIRouter()

# Global generator instance
_generator: Optional[DeckGenerator] = None


def get_generator() -> DeckGenerator:
    """Get the global deck generator instance."""
    global _generator
    if _generator is None:
        _generator = DeckGenerator()
    return _generator


async def _read_upload(upload: Optional[UploadFile]) -> tuple[Optional[bytes], Optional[str]]:
    if upload is None:
        return None, None
    data = await upload.read()
    return data, upload.filename


@router.post("/generate")
async def generate_deck(
    slideType: str = Form(DEFAULT_MAPPING_SET),
    template: Optional[UploadFile] = File(None),
    excel: Optional[UploadFile] = File(None),
):
    """Fill an uploaded template with values from an uploaded workbook."""
    template_bytes, template_name = await _read_upload(template)
    excel_bytes, excel_name = await _read_upload(excel)

    generator = get_generator()
    # Unzip, parse and rezip are CPU bound; keep them off the event loop
    result = await run_in_threadpool(
        generator.generate,
        mapping_set_id=slideType,
        template=template_bytes,
        workbook=excel_bytes,
        template_filename=template_name,
        workbook_filename=excel_name,
    )

    if not result.success:
        status_code = 400 if result.invalid_input else 500
        return PlainTextResponse(result.error, status_code=status_code)

    return Response(
        content=result.content,
        media_type=PPTX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


@router.get("/mapping-sets")
async def get_mapping_sets():
    """List the registered mapping sets."""
    sets = list_mapping_sets()
    return {
        "default": get_generator().settings.default_mapping_set,
        "count": len(sets),
        "mapping_sets": [info.model_dump() for info in sets],
    }


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from ..config import settings

    config = {
        "default_mapping_set": settings.default_mapping_set,
        "output_filename": settings.output_filename,
        "max_upload_bytes": settings.max_upload_bytes,
    }

    return {
        "status": "ok",
        "service": "deckfill",
        "config": config,
    }
