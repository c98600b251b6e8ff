import uuid

from tender_system.models.employee import Employee, Organization, OrganizationResponsible
from tender_system.models.enums import BidAuthorType, BidStatus, OrganizationType, TenderServiceType, TenderStatus
from tender_system.services.bids_service import BidService
from tender_system.services.tenders_service import TenderService


def create_employee(db, username, organization=None):
    emp = Employee(id=uuid.uuid4(), username=username)
    db.add(emp)
    db.commit()
    if organization is not None:
        db.add(OrganizationResponsible(organization_id=organization.id, user_id=emp.id))
        db.commit()
    return emp


def create_organization(db, name="Org", members=()):
    org = Organization(id=uuid.uuid4(), name=name, type=OrganizationType.LLC.value)
    db.add(org)
    db.commit()
    employees = [create_employee(db, username, org) for username in members]
    return org, employees


def create_tender(db, org, creator, *, name="Road repair", service_type=TenderServiceType.construction,
                  published=True):
    svc = TenderService()
    tender = svc.create(
        db,
        name=name,
        description=f"{name} description",
        service_type=service_type,
        organization_id=org.id,
        creator_username=creator.username,
    )
    if published:
        tender = svc.set_status(db, tender_id=tender.id, username=creator.username,
                                status=TenderStatus.published)
    return tender


def create_bid(db, tender, author, *, name="Offer", author_type=BidAuthorType.user,
               author_id=None, published=True, svc=None):
    svc = svc or BidService()
    bid = svc.create(
        db,
        name=name,
        description=f"{name} description",
        tender_id=tender.id,
        author_type=author_type,
        author_id=author_id or author.id,
    )
    if published:
        bid = svc.set_status(db, bid_id=bid.id, username=author.username, status=BidStatus.published)
    return bid
