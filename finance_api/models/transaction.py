"""Transaction data models."""
import math
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_api.utils.timestamp import coerce_timestamp


class _TransactionFields(BaseModel):
    """Coercion rules shared by create and update bodies."""

    # Unknown keys (including "_id" and "createdAt") are dropped
    model_config = ConfigDict(extra="ignore")

    @field_validator("amount", mode="before", check_fields=False)
    @classmethod
    def _coerce_amount(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("amount must be a number")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("amount must not be empty")
        return v

    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def _coerce_date(cls, v: Any) -> Optional[datetime]:
        # Falsy values (None, "", 0, false) mean "no date"
        if v is None or v == "" or (isinstance(v, (int, float)) and v == 0):
            return None
        return coerce_timestamp(v)


class TransactionCreate(_TransactionFields):
    """Body of ``POST /transactions``."""

    email: str = Field(..., min_length=1, description="Owner email")
    type: str = Field(..., min_length=1, description="'income' or 'expense'")
    amount: float = Field(..., allow_inf_nan=False, description="Amount; numeric strings are accepted")
    category: Optional[str] = Field(None, description="Free-form category")
    date: Optional[datetime] = Field(None, description="When it happened; defaults to now")

    @field_validator("amount", mode="before")
    @classmethod
    def _require_amount(cls, v: Any) -> Any:
        # A numeric 0 counts as missing; the string "0" is a present value
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v == 0:
            raise ValueError("amount is required")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "a@b.com",
                "type": "expense",
                "category": "Food",
                "amount": "45.99",
                "date": "2024-01-15T10:30:00Z",
            }
        }
    )

    def to_document(self, created_at: datetime) -> Dict[str, Any]:
        """Build the stored document, stamping ``createdAt`` and defaulting ``date``."""
        doc: Dict[str, Any] = {
            "email": self.email,
            "type": self.type,
            "amount": self.amount,
            "date": self.date or created_at,
            "createdAt": created_at,
        }
        if self.category is not None:
            doc["category"] = self.category
        return doc


class TransactionUpdate(_TransactionFields):
    """Body of ``PUT /transactions/{id}``; every field is optional."""

    email: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, allow_inf_nan=False)
    category: Optional[str] = None
    date: Optional[datetime] = None

    def to_changes(self) -> Dict[str, Any]:
        """Fields the client supplied with a non-null value."""
        return self.model_dump(exclude_none=True)


class Transaction(BaseModel):
    """A stored transaction as returned to clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: str
    type: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[datetime] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _drop_non_finite(cls, v: Any) -> Any:
        # Older records may hold NaN, which JSON cannot carry
        if isinstance(v, float) and not math.isfinite(v):
            return None
        return v

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Transaction":
        return cls.model_validate(dict(doc))


class InsertResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inserted_id: str = Field(..., alias="insertedId")
    acknowledged: bool


class Overview(BaseModel):
    """Income, expense and balance for one email."""

    model_config = ConfigDict(populate_by_name=True)

    total_income: float = Field(0, alias="totalIncome")
    total_expense: float = Field(0, alias="totalExpense")
    balance: float = 0

    @classmethod
    def from_type_totals(cls, totals: Mapping[Optional[str], float]) -> "Overview":
        """Build from ``{type: summed amount}``; missing types count as 0."""
        income = totals.get("income", 0) or 0
        expense = totals.get("expense", 0) or 0
        return cls(total_income=income, total_expense=expense, balance=income - expense)


class CategoryTotal(BaseModel):
    category: Optional[str] = None
    total: float = 0


class MessageResponse(BaseModel):
    message: str
