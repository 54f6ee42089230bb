"""Placemaker AI.

Backend for stakeholder consultation and public engagement on urban
planning projects.

High-level architecture
-----------------------

- ``placemaker_ai.core``: logging, monitoring, the database layer (SQLModel
  entities and repositories) and the domain/IO models.
- ``placemaker_ai.integrations``: thin HTTP clients for the UK civic-data
  APIs (postcodes.io, the Parliament members API, MapIt) and the
  transactional email provider.
- ``placemaker_ai.analytics``: feedback collection and the sentiment, theme,
  summary and geographic analysis passes.
- ``placemaker_ai.server``: the FastAPI application, its routers and the
  services behind them.

Typical workflow
----------------

1. A project team creates a project and sets its map location.
2. Stakeholders are added by hand or auto-detected from the location.
3. The public leaves map feedback, fills in forms and sends enquiries
   through the embeddable widget.
4. The team answers enquiries, mails its subscribers and runs the feedback
   analysis.
"""

__version__ = "0.1.0"
