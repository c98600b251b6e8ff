# tender_system/services/identity_service.py
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from tender_system.core.errors import NotFoundError
from tender_system.models.employee import Employee, Organization, OrganizationResponsible


class IdentityService:
    """
    Read-only lookups against the employee / organization reference tables.
    Any missing row surfaces as NotFoundError.
    """

    def get_employee_by_username(self, db: Session, username: str) -> Employee:
        employee = db.execute(
            select(Employee).where(Employee.username == username)
        ).scalar_one_or_none()
        if not employee:
            raise NotFoundError(f"Employee '{username}' not found.")
        return employee

    def get_employee(self, db: Session, employee_id: uuid.UUID) -> Employee:
        employee = db.get(Employee, employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found.")
        return employee

    def get_organization(self, db: Session, organization_id: uuid.UUID) -> Organization:
        org = db.get(Organization, organization_id)
        if not org:
            raise NotFoundError(f"Organization {organization_id} not found.")
        return org

    def find_organization_for_user(
        self, db: Session, employee_id: uuid.UUID
    ) -> Optional[Organization]:
        return (
            db.execute(
                select(Organization)
                .join(
                    OrganizationResponsible,
                    OrganizationResponsible.organization_id == Organization.id,
                )
                .where(OrganizationResponsible.user_id == employee_id)
            )
            .scalars()
            .first()
        )

    def get_organization_for_user(self, db: Session, employee_id: uuid.UUID) -> Organization:
        org = self.find_organization_for_user(db, employee_id)
        if not org:
            raise NotFoundError(f"Employee {employee_id} is not responsible for any organization.")
        return org

    def get_employees_in_organization(
        self, db: Session, organization_id: uuid.UUID
    ) -> List[Employee]:
        return list(
            db.execute(
                select(Employee)
                .join(OrganizationResponsible, OrganizationResponsible.user_id == Employee.id)
                .where(OrganizationResponsible.organization_id == organization_id)
            )
            .scalars()
            .all()
        )
