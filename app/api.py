"""
FastAPI routes for CSV upload, dashboard figures and TXF download.
Thin API layer over services.transaction_service.
"""
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as PydanticValidationError

from core.config import get_settings
from core.exceptions import (
    DataNotFoundError,
    FileProcessingError,
    ParsingError,
    TxfConverterException,
    ValidationError,
)
from core.logger import setup_logger
from core.parsing import parse_csv_text
from core.schema import RawRow, TransactionFilter
from services.transaction_service import TransactionService

logger = setup_logger(__name__)
settings = get_settings()

app = FastAPI(
    title="TXF Converter",
    description="Convert accounting CSV exports to TXF tax-import files",
    version="1.0.0"
)

transaction_service = TransactionService()

EXPORT_FILENAME = "tax_import.txf"

ERROR_STATUS_CODES = {
    FileProcessingError: 400,
    DataNotFoundError: 404,
    ParsingError: 422,
    ValidationError: 422,
}


@app.exception_handler(TxfConverterException)
async def converter_exception_handler(request: Request, exc: TxfConverterException):
    """Map converter errors to HTTP status codes."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    logger.error(f"{request.url.path} failed ({status_code}): {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "txf_converter",
        "version": "1.0.0"
    }


def validate_file_extension(filename: Optional[str]) -> None:
    """
    Validate file has correct extension.
    
    Args:
        filename: Name of file to validate
    
    Raises:
        FileProcessingError: If file extension is invalid
    """
    if not filename or not filename.lower().endswith(".csv"):
        raise FileProcessingError(
            f"Invalid file type: {filename}. Only .csv is supported.",
            details={"filename": filename}
        )


async def read_upload(file: UploadFile) -> List[RawRow]:
    """
    Read an uploaded CSV into raw rows.
    
    Raises:
        FileProcessingError: Wrong extension or encoding
        HTTPException: 413 when the file is over the upload limit
        ParsingError: When the CSV cannot be parsed
    """
    validate_file_extension(file.filename)
    
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.max_upload_mb} MB upload limit"
        )
    
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise FileProcessingError(
            "File must be UTF-8 encoded",
            details={"filename": file.filename}
        )
    
    return parse_csv_text(text, label=file.filename)


@app.post("/summary")
async def summarize(
    file: UploadFile = File(...),
    year: Optional[int] = Query(None),
    month: Optional[str] = Query(None),
    category: Optional[str] = Query(None)
) -> Dict[str, Any]:
    """
    Compute dashboard figures for an uploaded CSV export.
    
    Args:
        file: Accounting export CSV
        year: Optional calendar year selection
        month: Optional YYYY-MM selection
        category: Optional raw category (account name) selection
    
    Returns:
        Summary, monthly series, expense breakdown and row tallies
    """
    try:
        flt = TransactionFilter(year=year, month=month, category=category)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid filter",
            details={"errors": e.errors(include_url=False, include_context=False)}
        )
    
    rows = await read_upload(file)
    logger.info(f"Received {file.filename} with {len(rows)} rows for summary")
    
    dashboard = transaction_service.build_dashboard(rows, flt)
    
    return {
        "summary": dashboard["summary"].model_dump(mode="json", by_alias=True),
        "monthly": [entry.model_dump(mode="json") for entry in dashboard["monthly"]],
        "expensesByCategory": [
            entry.model_dump(mode="json") for entry in dashboard["expenses_by_category"]
        ],
        "availableYears": dashboard["available_years"],
        "acceptedCount": dashboard["accepted_count"],
        "skippedCount": dashboard["skipped_count"],
    }


@app.post("/export")
async def export_txf(
    file: UploadFile = File(...),
    year: Optional[int] = Query(None),
    company_name: Optional[str] = Query(None)
):
    """
    Convert an uploaded CSV export to a TXF download.
    
    Args:
        file: Accounting export CSV
        year: Optional transaction year to export
        company_name: Overrides the configured company for the A header line
    
    Returns:
        TXF file as a text/plain attachment
    """
    if company_name is not None and (
        not company_name.strip() or "\n" in company_name or "\r" in company_name
    ):
        raise ValidationError(
            "company_name must be a single non-empty line",
            details={"company_name": company_name}
        )
    
    rows = await read_upload(file)
    logger.info(f"Received {file.filename} with {len(rows)} rows for export")
    
    export = transaction_service.build_export(rows, company_name=company_name, year=year)
    
    return Response(
        content=export.content,
        media_type="text/plain",
        headers={
            "Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"',
            "X-TXF-Converted": str(export.converted_count),
            "X-TXF-Unmapped": str(export.unmapped_count),
            "X-TXF-Failed": str(export.failed_count),
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
