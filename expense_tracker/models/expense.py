"""
Core Data Models for Expense Tracker

These models define the schemas for all data flowing through the system.

DESIGN DECISION: The stored record (Expense) carries no constraints.
The store assumes well-formed inputs; validation happens one layer up,
on ExpenseInput, before anything reaches the store.
"""

from datetime import date as calendar_date
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TotalsPolicy(str, Enum):
    """
    How category totals react to a deletion.

    CUMULATIVE keeps every amount ever added (a deleted expense still
    counts). RECOMPUTE rebuilds the category total from visible
    expenses whenever one of them is deleted.
    """
    CUMULATIVE = "cumulative"
    RECOMPUTE = "recompute"


class QueryType(str, Enum):
    """Query kinds the executor knows how to run."""
    LIST = "list"          # All visible expenses, insertion order
    CATEGORY = "category"  # Visible expenses for one category
    TOTALS = "totals"      # Per-category running totals
    DATE = "date"          # Visible expenses on one date
    TOP = "top"            # N largest visible expenses


# =============================================================================
# CORE EXPENSE MODELS
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    `index` is the position of the record in the store's append-only
    log. It is assigned once at insertion and is the handle used for
    deletion.

    `date` is kept as canonical YYYY-MM-DD text: lexicographic order
    of these strings is chronological order.
    """

    index: int = Field(
        ...,
        description="Stable positional id assigned at insertion"
    )
    amount: float = Field(
        ...,
        description="Expense amount"
    )
    category: str = Field(
        ...,
        description="Category label (exact, case-sensitive match)"
    )
    date: str = Field(
        ...,
        description="Expense date as YYYY-MM-DD"
    )
    is_deleted: bool = Field(
        default=False,
        description="Tombstone flag for lazy deletion"
    )

    def to_result_dict(self) -> dict:
        """Convert to a dictionary for query results."""
        return {
            "index": self.index,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
        }


class ExpenseInput(BaseModel):
    """
    A new expense as entered by the user.

    CRITICAL: This is where input is validated. The store trusts
    whatever reaches it, so every caller goes through this model first.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: float = Field(
        ...,
        ge=0,
        description="Amount spent"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category label"
    )
    date: str = Field(
        ...,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="Expense date as YYYY-MM-DD"
    )

    @field_validator('date')
    @classmethod
    def validate_calendar_date(cls, v: str) -> str:
        """Reject strings that look right but are not real dates (2024-02-30)."""
        try:
            calendar_date.fromisoformat(v)
        except ValueError:
            raise ValueError(f"Not a valid calendar date: {v}")
        return v


# =============================================================================
# QUERY MODELS
# =============================================================================

class StructuredQuery(BaseModel):
    """
    A query against the expense store.

    Built by the caller (UI page, script) and executed deterministically
    by the QueryExecutor.
    """

    query_id: UUID = Field(
        default_factory=uuid4
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    query_type: QueryType = Field(
        ...,
        description="Type of query to execute"
    )

    # Parameters (which ones apply depends on query_type)
    category: Optional[str] = None
    date: Optional[str] = Field(
        default=None,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
    )
    limit: int = Field(
        default=5,
        ge=0,
        description="N for top-N queries"
    )

    @model_validator(mode='after')
    def strip_category(self) -> 'StructuredQuery':
        """Categories match exactly, but surrounding whitespace is never meaningful."""
        if self.category is not None:
            self.category = self.category.strip()
        return self


class QueryResult(BaseModel):
    """
    Result of executing a structured query.

    This is what the UI renders.
    """

    query_id: UUID
    executed_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    # Success/failure
    success: bool
    error_message: Optional[str] = None

    # Results
    data_found: bool = Field(
        ...,
        description="Was any data found?"
    )
    result_count: int = Field(
        ge=0,
        description="Number of results"
    )
    results: list[dict] = Field(
        default_factory=list,
        description="Query results as list of dicts"
    )

    # Aggregation result for totals queries
    aggregation_result: Optional[dict] = None

    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried"
    )
