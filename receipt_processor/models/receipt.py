import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from receipt_processor.utils.errors import MalformedInputError

MONEY_PATTERN = re.compile(r"^[0-9]+\.[0-9]{2}$")
DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
TIME_PATTERN = re.compile(r"^[0-9]{2}:[0-9]{2}(:[0-9]{2})?$")


def parseMoney(value: Any) -> Decimal:
    """
    Parse a currency amount sent as a string such as "12.25"

    Args:
        value: Raw value from the request body

    Returns:
        Decimal: The exact amount

    Raises:
        MalformedInputError: If the value is not a string with exactly two fraction digits
    """
    if not isinstance(value, str) or not MONEY_PATTERN.fullmatch(value):
        raise MalformedInputError(f"Invalid currency amount: {value!r}")
    return Decimal(value)


def parsePurchaseDate(value: str) -> date:
    """Parse a YYYY-MM-DD purchase date, raising MalformedInputError on failure"""
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise MalformedInputError(f"Invalid purchase date: {value!r}")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise MalformedInputError(f"Invalid purchase date: {value!r}") from e


def parsePurchaseTime(value: str) -> time:
    """Parse a 24h HH:MM (or HH:MM:SS) purchase time, raising MalformedInputError on failure"""
    if not isinstance(value, str) or not TIME_PATTERN.fullmatch(value):
        raise MalformedInputError(f"Invalid purchase time: {value!r}")
    timeFormat = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    try:
        return datetime.strptime(value, timeFormat).time()
    except ValueError as e:
        raise MalformedInputError(f"Invalid purchase time: {value!r}") from e


class Item(BaseModel):
    """A single purchased line on a receipt"""
    model_config = ConfigDict(frozen=True)

    shortDescription: str = Field(description="Short product description for the item")
    price: Decimal = Field(description="Price paid for the item, sent as a string like \"6.49\"")

    @field_validator("price", mode="before")
    @classmethod
    def _validate_price(cls, value: Any) -> Decimal:
        return parseMoney(value)


class Receipt(BaseModel):
    """A submitted purchase receipt. Immutable once accepted"""
    model_config = ConfigDict(frozen=True)

    retailer: str = Field(description="Name of the retailer or store the receipt is from")
    purchaseDate: str = Field(description="Date of purchase, e.g. 2022-01-01")
    purchaseTime: str = Field(description="24-hour time of purchase, e.g. 13:01")
    items: Tuple[Item, ...] = Field(default=(), description="Items purchased, in receipt order")
    total: Decimal = Field(description="Total amount paid, sent as a string like \"35.35\"")

    @field_validator("total", mode="before")
    @classmethod
    def _validate_total(cls, value: Any) -> Decimal:
        return parseMoney(value)

    @field_validator("purchaseDate")
    @classmethod
    def _validate_purchase_date(cls, value: str) -> str:
        parsePurchaseDate(value)
        return value

    @field_validator("purchaseTime")
    @classmethod
    def _validate_purchase_time(cls, value: str) -> str:
        parsePurchaseTime(value)
        return value


class StoredReceipt(BaseModel):
    """A receipt paired with the identifier the store assigned to it"""
    model_config = ConfigDict(frozen=True)

    id: str
    receipt: Receipt
