import uuid
from sqlalchemy.orm import Session
from tender_system.db.session import SessionLocal
from tender_system.models.employee import Employee, Organization, OrganizationResponsible
from tender_system.models.enums import OrganizationType


SEED_ORGANIZATIONS = {
    "Northwind Builders": {
        "type": OrganizationType.LLC,
        "employees": ["alice", "bob", "carol", "dave", "erin"],
    },
    "Harbor Logistics": {
        "type": OrganizationType.JSC,
        "employees": ["frank", "grace"],
    },
}

# employees with no organization, for user-authored bids
SEED_FREELANCERS = ["heidi"]


def seed():
    db: Session = SessionLocal()

    for org_name, entry in SEED_ORGANIZATIONS.items():
        org = Organization(
            id=uuid.uuid4(),
            name=org_name,
            description=f"Seed organization {org_name}",
            type=entry["type"].value,
        )
        db.add(org)
        db.commit()

        for username in entry["employees"]:
            emp = Employee(id=uuid.uuid4(), username=username, first_name=username.title())
            db.add(emp)
            db.commit()

            db.add(OrganizationResponsible(organization_id=org.id, user_id=emp.id))

        db.commit()

    for username in SEED_FREELANCERS:
        db.add(Employee(id=uuid.uuid4(), username=username, first_name=username.title()))
    db.commit()

    db.close()

if __name__ == "__main__":
    seed()
