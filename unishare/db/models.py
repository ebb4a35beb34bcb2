"""Database base for DDD architecture"""

from enum import Enum
from typing import Type

from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import declarative_base

# Keep Base for ORM models
Base = declarative_base()

# NOTE: All model classes are in infrastructure/orm/ directory
# This follows DDD architecture where infrastructure details are separated
# from domain logic.


def enum_column(enum_cls: Type[Enum], name: str) -> SQLEnum:
    """Enum column type that stores member values rather than member names"""
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
