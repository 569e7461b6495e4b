"""Sample values for generated fields, keyed by native type category."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from faker import Faker


class TypeCategory(str, Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    BYTES = "bytes"
    TIME = "time"
    UNKNOWN = "unknown"


NATIVE_TYPE_CATEGORIES = {
    "bool": TypeCategory.BOOLEAN,
    "int": TypeCategory.INTEGER,
    "int8": TypeCategory.INTEGER,
    "int16": TypeCategory.INTEGER,
    "int32": TypeCategory.INTEGER,
    "int64": TypeCategory.INTEGER,
    "uint": TypeCategory.INTEGER,
    "uint8": TypeCategory.INTEGER,
    "uint16": TypeCategory.INTEGER,
    "uint32": TypeCategory.INTEGER,
    "uint64": TypeCategory.INTEGER,
    "float32": TypeCategory.FLOAT,
    "float64": TypeCategory.FLOAT,
    "string": TypeCategory.TEXT,
    "[]byte": TypeCategory.BYTES,
    "time.Time": TypeCategory.TIME,
}

SAMPLE_TEXT = "hello world"
SAMPLE_BYTES = b"hello world"

FAKE_TIME_START = datetime(2000, 1, 1)
FAKE_TIME_END = datetime(2030, 12, 31)


def categorize(native_type: str) -> TypeCategory:
    return NATIVE_TYPE_CATEGORIES.get(native_type, TypeCategory.UNKNOWN)


def sample_value(category: TypeCategory) -> Any:
    if category is TypeCategory.BOOLEAN:
        return True
    if category is TypeCategory.INTEGER:
        return 1
    if category is TypeCategory.FLOAT:
        return 1.0
    if category is TypeCategory.TEXT:
        return SAMPLE_TEXT
    if category is TypeCategory.BYTES:
        return SAMPLE_BYTES
    if category is TypeCategory.TIME:
        return datetime.now()
    return 1


def make_faker(seed: Optional[int] = None) -> Faker:
    faker = Faker()
    if seed is not None:
        faker.seed_instance(seed)
    return faker


def fake_value(category: TypeCategory, faker: Faker) -> Any:
    """Random value of the category, for fixture rows."""
    if category is TypeCategory.BOOLEAN:
        return faker.pybool()
    if category is TypeCategory.INTEGER:
        return faker.pyint(min_value=1, max_value=100000)
    if category is TypeCategory.FLOAT:
        return faker.pyfloat(right_digits=2, min_value=0, max_value=100000)
    if category is TypeCategory.TEXT:
        return faker.word()
    if category is TypeCategory.BYTES:
        return faker.binary(length=16)
    if category is TypeCategory.TIME:
        return faker.date_time_between_dates(datetime_start=FAKE_TIME_START, datetime_end=FAKE_TIME_END)
    return faker.pyint()
