"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- projects: projects, admin users and team members
- stakeholders: stakeholders, engagements and auto-detection results
- councils: council registry, councillor import and search
- feedback: public pins and feedback forms
- enquiries: enquiries, thread messages and team queries
- mailing: subscribers, broadcasts and direct sends
- map_data: markers, image overlays and GeoJSON layers
- tours: tours and tour stops
- embed: public embed payload
- analytics: cached analysis responses
- webhooks: inbound email payloads
"""
