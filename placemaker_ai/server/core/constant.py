"""Constant values shared by the HTTP layer."""

PROJECT_NAME = "Placemaker AI"
API_V1_STR = "/api/v1"

# Header set by the identity proxy in front of the service
USER_ID_HEADER = "X-User-Id"
