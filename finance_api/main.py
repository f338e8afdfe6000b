"""FastAPI main application."""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from finance_api.config import settings
from finance_api.errors import FinanceAPIError, InvalidData, MissingParameter, NotFound
from finance_api.models import (
    CategoryTotal,
    InsertResponse,
    MessageResponse,
    Overview,
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    UserProfile,
    UserUpsert,
    UserUpsertResponse,
)
from finance_api.storage import Stores, create_stores, parse_object_id
from finance_api.utils import configure_logging, utcnow

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the stores before serving and close them on shutdown."""
    stores = create_stores(settings)
    await stores.connect()
    app.state.stores = stores
    logger.info("Finance API started", extra={"storage_backend": settings.storage_backend})
    try:
        yield
    finally:
        await stores.close()
        logger.info("Finance API stopped")


app = FastAPI(title=settings.app_name, debug=settings.debug, version="1.0.0", lifespan=lifespan)

# Any origin may call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Dependencies ---

def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def required_email(email: Optional[str] = Query(None, description="Owner email")) -> str:
    if not email:
        raise MissingParameter("email")
    return email


# --- Error handlers ---

@app.exception_handler(FinanceAPIError)
async def finance_error_handler(request: Request, exc: FinanceAPIError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or incomplete bodies are InvalidData (400), not 422."""
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return await finance_error_handler(request, InvalidData(errors=errors))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    # ServerErrorMiddleware re-raises after this response; the server logs the traceback
    return JSONResponse(status_code=500, content={"message": "Server error"})


# --- Routes ---

@app.get("/", response_class=PlainTextResponse)
async def root():
    """Root endpoint."""
    return "Server is running fine.."


@app.get("/transactions/overview", response_model=Overview)
async def transactions_overview(
    email: str = Depends(required_email),
    stores: Stores = Depends(get_stores),
):
    """Total income, total expense and balance for one email."""
    totals = await stores.transactions.totals_by_type(email)
    return Overview.from_type_totals(totals)


@app.get("/transactions", response_model=List[Transaction])
async def list_transactions(
    email: str = Depends(required_email),
    stores: Stores = Depends(get_stores),
):
    """All transactions of one email, most recent first."""
    return await stores.transactions.list_for_email(email)


@app.get("/transactions/category-total", response_model=List[CategoryTotal])
async def category_totals(
    email: str = Depends(required_email),
    stores: Stores = Depends(get_stores),
):
    return await stores.transactions.totals_by_category(email)


@app.get("/transactions/{transaction_id}", response_model=Transaction)
async def get_transaction(transaction_id: str, stores: Stores = Depends(get_stores)):
    transaction = await stores.transactions.get(parse_object_id(transaction_id))
    if transaction is None:
        raise NotFound("Transaction not found")
    return transaction


@app.post("/transactions", response_model=InsertResponse)
async def create_transaction(payload: TransactionCreate, stores: Stores = Depends(get_stores)):
    """
    Record a transaction.

    ``createdAt`` is always stamped here; ``date`` defaults to the same
    instant when the client leaves it out.
    """
    result = await stores.transactions.insert(payload.to_document(utcnow()))
    logger.info("Transaction created", extra={"transaction_id": result.inserted_id, "type": payload.type})
    return InsertResponse(inserted_id=result.inserted_id, acknowledged=result.acknowledged)


@app.put("/transactions/{transaction_id}", response_model=MessageResponse)
async def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    stores: Stores = Depends(get_stores),
):
    """Change only the fields present in the body."""
    object_id = parse_object_id(transaction_id)
    changes = payload.to_changes()
    if not changes:
        raise InvalidData("No fields to update")

    if not await stores.transactions.update(object_id, changes):
        raise NotFound("Transaction not found")

    logger.info("Transaction updated", extra={"transaction_id": transaction_id, "fields": sorted(changes)})
    return MessageResponse(message="Transaction updated successfully")


@app.delete("/transactions/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(transaction_id: str, stores: Stores = Depends(get_stores)):
    if not await stores.transactions.delete(parse_object_id(transaction_id)):
        raise NotFound("Transaction not found")

    logger.info("Transaction deleted", extra={"transaction_id": transaction_id})
    return MessageResponse(message="Transaction deleted successfully")


@app.get("/users/by-email", response_model=UserProfile)
async def get_user_by_email(
    email: str = Depends(required_email),
    stores: Stores = Depends(get_stores),
):
    """Public profile of a user; the password is never returned."""
    user = await stores.users.get_by_email(email)
    if user is None:
        raise NotFound("User not found")
    return user


@app.post("/users", response_model=UserUpsertResponse)
async def create_or_update_user(payload: UserUpsert, stores: Stores = Depends(get_stores)):
    """Create the user, or update the existing one with the same email."""
    result = await stores.users.upsert(payload, utcnow())
    if result.created:
        logger.info("User created", extra={"user_id": result.user_id})
        message = "User created successfully"
    else:
        logger.info("User updated", extra={"user_id": result.user_id})
        message = "User updated successfully"
    return UserUpsertResponse(message=message, inserted_id=result.user_id)


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
