"""
Smoke tests for the assembled application.

Building the app registers every router, so importing it fails when a
dependency's parameter clashes with a route's path parameter.
"""

import pytest
from fastapi.dependencies.utils import get_flat_dependant
from fastapi.routing import APIRoute

from placemaker_ai.server.main import app

USERS = "/api/v1/admin/users"


def _api_routes():
    return [route for route in app.routes if isinstance(route, APIRoute)]


class TestRouteTable:
    def test_admin_user_routes_registered(self):
        paths = {(route.path, method) for route in _api_routes() for method in route.methods}

        assert (f"{USERS}/{{user_id}}", "DELETE") in paths
        assert (f"{USERS}/{{user_id}}", "GET") in paths
        assert (f"{USERS}/{{user_id}}", "PATCH") in paths

    @pytest.mark.parametrize("route", _api_routes(), ids=lambda r: f"{sorted(r.methods)[0]} {r.path}")
    def test_header_parameters_never_shadow_path_parameters(self, route):
        flat = get_flat_dependant(route.dependant)
        path_names = {param.name for param in flat.path_params}
        header_names = {param.name for param in flat.header_params}

        assert not path_names & header_names


@pytest.mark.asyncio
class TestUserIdRoutes:
    async def test_delete_by_path_id_with_identity_header(self, client, admin_user, admin_headers, client_user):
        response = await client.delete(f"{USERS}/{client_user.id}", headers=admin_headers)

        assert response.status_code == 204

    async def test_delete_self_rejected(self, client, admin_user, admin_headers):
        response = await client.delete(f"{USERS}/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete your own account"

    async def test_path_id_is_not_taken_as_identity(self, client, admin_user):
        response = await client.delete(f"{USERS}/{admin_user.id}")

        assert response.status_code == 401
