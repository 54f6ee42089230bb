"""
Database entity models.

Modules:
- projects: projects, users, project access grants and team members
- stakeholders: stakeholders and their engagement log
- feedback: public map feedback, feedback forms and responses
- enquiries: enquiries, thread messages and team queries
- mailing: subscribers and sent project email
- map_data: markers, image overlays and GeoJSON layers
- tours: tours and tour stops
- councils: councils and councillors
- analysis: cached feedback analysis
"""

from .analysis import AnalysisResult
from .councils import Council, Councillor
from .enquiries import Enquiry, EnquiryMessage, EnquiryQuery
from .feedback import FeedbackForm, FeedbackResponse, PublicPin
from .mailing import ProjectEmail, Subscriber
from .map_data import GeoLayer, ImageOverlay, MapMarker
from .projects import Project, ProjectAccess, TeamMember, User
from .stakeholders import Stakeholder, StakeholderEngagement
from .tours import Tour, TourStop

__all__ = [
    "AnalysisResult",
    "Council",
    "Councillor",
    "Enquiry",
    "EnquiryMessage",
    "EnquiryQuery",
    "FeedbackForm",
    "FeedbackResponse",
    "GeoLayer",
    "ImageOverlay",
    "MapMarker",
    "Project",
    "ProjectAccess",
    "ProjectEmail",
    "PublicPin",
    "Stakeholder",
    "StakeholderEngagement",
    "Subscriber",
    "TeamMember",
    "Tour",
    "TourStop",
    "User",
]
