"""Convert module routes."""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from pdfbridge.shared.errors import InvalidInputError
from pdfbridge.shared.logging import get_logger

from .schemas import ConvertRequest
from .service import ConvertService

logger = get_logger(__name__)
router = APIRouter(tags=["convert"])

OUTPUT_FILENAME = "output.pdf"


def get_service(request: Request) -> ConvertService:
    """Dependency injection for service, built from the app's settings."""
    return ConvertService.from_settings(request.app.state.settings)


@router.post("/convert")
async def convert(
    request: ConvertRequest,
    service: ConvertService = Depends(get_service),
) -> Response:
    """
    Convert HTML or a URL to PDF.

    Returns the PDF as binary content with download headers.
    """
    if not request.source:
        return JSONResponse(status_code=400, content={"error": "Input 'source' is required"})

    logger.info("Received request to convert source to PDF")

    try:
        pdf_bytes = await service.convert(
            request.source,
            format=request.format,
            orientation=request.orientation,
            margin=request.margin,
            print_background=request.printBackground,
        )
    except InvalidInputError as e:
        logger.warning(f"Rejected conversion request: {e}")
        return JSONResponse(status_code=e.http_status, content={"error": str(e)})
    except Exception as e:
        logger.error(f"Conversion failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Conversion failed. Check the server logs for details.",
                "details": str(e),
            },
        )

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{OUTPUT_FILENAME}"',
            "Content-Length": str(len(pdf_bytes)),
        },
    )
