from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse
from fastapi.exception_handlers import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import re
from app.routers import storage_locations, location_codes
from app.security import verify_api_key

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Shoe Storage Locations",
    description="Storage location tracking for serviced shoes",
    version="1.0.0"
)

def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "success": False},
        headers=headers,
    )

def _format_validation_message(err: dict) -> str:
    loc = err.get("loc") or ()
    # Remove "body"/"query" prefix if present
    if loc and loc[0] in ("body", "query"):
        loc = loc[1:]
    field_name = ".".join(str(l) for l in loc)
    if err.get("type") == "missing":
        return f"{field_name or 'Request body'} is required"
    if err.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    msg = err.get("msg", "")
    # Remove common error prefixes using regex
    msg = re.sub(r"^(value is not a valid|Value error,|Value error|type error,|type error|none is not an allowed value|none is not allowed|not a valid)[:\s]*", "", msg, flags=re.IGNORECASE)
    # Replace 'input should be a valid string' with '<Field> cannot be empty'
    if msg.strip().lower() == "input should be a valid string":
        last_field = field_name.split('.')[-1] if field_name else "Field"
        msg = f"{last_field} cannot be empty"
    # Remove trailing punctuation and whitespace
    return msg.strip().rstrip('.')

# Request validation errors are reported like any other bad request: first message wins
@app.exception_handler(RequestValidationError)
async def fastapi_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = _format_validation_message(errors[0]) if errors else "Invalid request"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return _error_response(status.HTTP_400_BAD_REQUEST, message)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(exc.status_code, message, getattr(exc, "headers", None))

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

# Protected endpoints (require Bearer token)
@app.get("/", dependencies=[Depends(verify_api_key)])
def read_root():
    return {
        "message": "Shoe Storage Locations API",
        "status": "running",
        "version": "1.0.0"
    }

# Protected routes (require Bearer token)
app.include_router(location_codes.router, dependencies=[Depends(verify_api_key)])
app.include_router(storage_locations.router, dependencies=[Depends(verify_api_key)])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
