"""
Clients for the external services the platform talks to.

- civic: UK civic-data APIs (postcodes.io, UK Parliament members, MapIt)
- email: transactional email provider
"""
