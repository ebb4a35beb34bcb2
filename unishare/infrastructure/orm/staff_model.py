"""Staff ORM Model"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, JSON, Uuid
from sqlalchemy.sql import func

from ...db.models import Base, enum_column
from ...domain.enums import Department


class StaffModel(Base):
    __tablename__ = 'staff'

    id = Column(Uuid, primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    department = Column(enum_column(Department, 'department'), nullable=False, index=True)
    image = Column(String, nullable=False)
    courses = Column(JSON, nullable=False, default=list)
    qualification = Column(String, nullable=False)
    office = Column(String, nullable=False)
    counselling_hours = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    specialization = Column(JSON, nullable=False, default=list)
    years_of_experience = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
