from tender_system.models.employee import Employee, Organization, OrganizationResponsible
from tender_system.models.tender import Tender, TenderVersion
from tender_system.models.bid import Bid, BidVersion
from tender_system.models.bid_review import BidDecision, BidFeedback
