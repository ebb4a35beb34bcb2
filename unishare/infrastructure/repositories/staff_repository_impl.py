"""Staff repository implementation"""

from typing import Optional, List, Tuple

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session

from ...domain.repositories.staff_repository import IStaffRepository
from ...domain.entities.staff import Staff
from ...domain.enums import Department
from ...domain.value_objects.email import Email
from ...domain.value_objects.entity_ids import StaffId
from ..orm.staff_model import StaffModel

SORT_COLUMNS = {
    "name": StaffModel.name,
    "department": StaffModel.department,
    "created_at": StaffModel.created_at,
    "years_of_experience": StaffModel.years_of_experience,
}


class StaffRepositoryImpl(IStaffRepository):

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, staff_id: StaffId) -> Optional[StaffModel]:
        return self.session.query(StaffModel).filter(StaffModel.id == staff_id.value).first()

    async def get_by_id(self, staff_id: StaffId) -> Optional[Staff]:
        model = self._get_model(staff_id)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: Email) -> Optional[Staff]:
        model = self.session.query(StaffModel).filter(StaffModel.email == str(email)).first()
        return self._map_to_entity(model) if model else None

    async def add(self, staff: Staff) -> Staff:
        model = StaffModel(id=staff.id.value, created_at=staff.created_at)
        self._update_model_from_entity(model, staff)
        self.session.add(model)
        self.session.flush()
        return staff

    async def update(self, staff: Staff) -> Staff:
        model = self._get_model(staff.id)
        if model:
            self._update_model_from_entity(model, staff)
            self.session.flush()
        return staff

    async def delete(self, staff_id: StaffId) -> None:
        model = self._get_model(staff_id)
        if model:
            self.session.delete(model)
            self.session.flush()

    async def search(
        self,
        search: str,
        department: Optional[str],
        sort_by: str,
        offset: int,
        limit: int
    ) -> Tuple[List[Staff], int]:
        query = self.session.query(StaffModel)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                StaffModel.name.ilike(pattern),
                cast(StaffModel.department, String).ilike(pattern),
                cast(StaffModel.courses, String).ilike(pattern),
                StaffModel.qualification.ilike(pattern),
            ))
        if department:
            query = query.filter(cast(StaffModel.department, String) == department)

        total = query.count()
        models = query.order_by(SORT_COLUMNS[sort_by], StaffModel.id).offset(offset).limit(limit).all()
        return [self._map_to_entity(model) for model in models], total

    async def distinct_departments(self) -> List[str]:
        rows = self.session.query(StaffModel.department).distinct().all()
        return sorted(Department(department).value for (department,) in rows)

    def _update_model_from_entity(self, model: StaffModel, staff: Staff) -> None:
        model.name = staff.name
        model.email = str(staff.email)
        model.department = staff.department
        model.image = staff.image
        model.courses = list(staff.courses)
        model.qualification = staff.qualification
        model.office = staff.office
        model.counselling_hours = staff.counselling_hours
        model.phone_number = staff.phone_number
        model.bio = staff.bio
        model.specialization = list(staff.specialization)
        model.years_of_experience = staff.years_of_experience
        model.is_active = staff.is_active
        model.updated_at = staff.updated_at

    def _map_to_entity(self, model: StaffModel) -> Staff:
        return Staff(
            id=StaffId(model.id),
            name=model.name,
            email=Email(model.email),
            department=Department(model.department),
            image=model.image,
            courses=list(model.courses or []),
            qualification=model.qualification,
            office=model.office,
            counselling_hours=model.counselling_hours,
            phone_number=model.phone_number,
            bio=model.bio,
            specialization=list(model.specialization or []),
            years_of_experience=model.years_of_experience,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
