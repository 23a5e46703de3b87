from fastapi import FastAPI, Request
from dotenv import load_dotenv

load_dotenv()
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import Base, SessionLocal, engine
from datetime import datetime
import routers.categories as categories
import routers.companies as companies
import routers.document_types as document_types
import routers.parties as parties
import routers.reference_data as reference_data
import routers.tax_rates as tax_rates
import routers.transaction_payments as transaction_payments
import routers.transactions as transactions
from crud.reference_data import seed_reference_data
import models  # noqa: F401  registers every table on Base.metadata
import os
import logging
from fastapi.openapi.utils import get_openapi


LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)  # Create the log directory if it doesn't exist

    # Create a unique log file name based on current date/time
    current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

    # Configure the root logger
    logging.basicConfig(
        level=LOG_LEVEL,
        format=LOG_FORMAT,
        filename=LOG_FILE,  # Log to a file
        filemode='a'  # Append to the file if it exists
    )

    # Also output logs to the console
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(console_handler)
else:
    # No log directory configured: console only
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)

if os.getenv("SEED_REFERENCE_DATA", "true").lower() in ("1", "true", "yes"):
    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()


app = FastAPI()

allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000"
)

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',') if origin.strip()]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Bookkeeping API",
        version="1.0.0",
        description="Income and expense ledger with payment tracking",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


# --- Error envelope ---
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = {"success": False, "message": exc.detail}
    data = getattr(exc, "data", None)
    if data is not None:
        content["data"] = jsonable_encoder(data)
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = f"Invalid input: {field}: {first.get('msg')}" if field else f"Invalid input: {first.get('msg')}"
    return JSONResponse(status_code=400, content={"success": False, "message": message, "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


API_PREFIX = "/api/v1"

app.include_router(transactions.router, prefix=API_PREFIX)
app.include_router(transaction_payments.router, prefix=API_PREFIX)
app.include_router(parties.clients_router, prefix=API_PREFIX)
app.include_router(parties.vendors_router, prefix=API_PREFIX)
app.include_router(categories.router, prefix=API_PREFIX)
app.include_router(companies.router, prefix=API_PREFIX)
app.include_router(document_types.router, prefix=API_PREFIX)
app.include_router(tax_rates.router, prefix=API_PREFIX)
app.include_router(reference_data.router, prefix=API_PREFIX)


@app.get("/")
async def test_route():
    return {"message": "Welcome to the bookkeeping API!"}
