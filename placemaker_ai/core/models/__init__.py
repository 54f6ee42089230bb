"""
Models package.

- domain: enums describing roles, statuses and categories, and UTC timestamp helpers
- io: request and response schemas for the HTTP API
"""
