"""
Pydantic Schemas for Request/Response Mapping

The submit form posts camelCase keys (and ``user`` for the name); the table
uses snake_case columns. The aliases below are that mapping.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Literal


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class OrderSubmission(BaseModel):
    """
    Body of POST /submit.

    Every field is optional: whatever the form leaves out is stored as NULL.
    Values are coerced leniently ("120" becomes 120) and unknown keys are
    ignored. No ranges are checked.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    timestamp: Optional[str] = Field(None, examples=["2024-01-01T00:00:00Z"])
    user: Optional[str] = Field(None, examples=["Alice"])
    main_course: Optional[str] = Field(None, alias="mainCourse", examples=["Beef"])
    main_course_price: Optional[int] = Field(None, alias="mainCoursePrice", examples=[120])
    combo: Optional[str] = Field(None)
    combo_price: Optional[int] = Field(None, alias="comboPrice")
    drink: Optional[str] = Field(None, examples=["Tea"])
    drink_price: Optional[int] = Field(None, alias="drinkPrice", examples=[30])
    dessert: Optional[str] = Field(None)
    dessert_price: Optional[int] = Field(None, alias="dessertPrice")
    total: Optional[int] = Field(None, examples=[150])

    @field_validator(
        "main_course_price", "combo_price", "drink_price", "dessert_price", "total",
        mode="before",
    )
    @classmethod
    def reject_booleans(cls, v):
        """JSON true/false is not a price, even though int() would accept it."""
        if isinstance(v, bool):
            raise ValueError("Input should be a valid integer, not a boolean")
        return v

    def to_row(self) -> dict:
        """Column values for the orders table, in insert order."""
        return {
            "timestamp": self.timestamp,
            "user_name": self.user,
            "main_course": self.main_course,
            "main_course_price": self.main_course_price,
            "combo": self.combo,
            "combo_price": self.combo_price,
            "drink": self.drink,
            "drink_price": self.drink_price,
            "dessert": self.dessert,
            "dessert_price": self.dessert_price,
            "total": self.total,
        }


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class OrderSummary(BaseModel):
    """One entry of GET /orders."""
    user_name: Optional[str]
    main_course: Optional[str]
    total: Optional[int]
    timestamp: Optional[str]

    class Config:
        from_attributes = True


class SubmitResponse(BaseModel):
    """Acknowledgment after storing an order."""
    result: Literal["success"] = "success"


class ErrorResponse(BaseModel):
    """Standard error response."""
    result: Literal["error"] = "error"
    error: str
