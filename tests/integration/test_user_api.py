"""Integration tests for user administration (Admin only)."""

from __future__ import annotations

import pytest

from modules.core.constants import Role

pytestmark = pytest.mark.integration

USERS_URL = "/api/v1/users/"


class TestUserList:
    def test_admin_lists_users_with_role_and_company(self, admin_client, company_user, customer):
        response = admin_client.get(USERS_URL)

        assert response.status_code == 200
        rows = {row["username"]: row for row in response.data["results"]}
        assert rows["company_buyer"]["role"] == Role.COMPANY
        assert rows["company_buyer"]["company_name"] == "Readers Club"
        assert rows["customer"]["company_name"] == ""
        assert rows["customer"]["is_locked_out"] is False

    def test_filter_by_role(self, admin_client, company_user, customer):
        response = admin_client.get(USERS_URL, {"role": "company"})
        assert [row["username"] for row in response.data["results"]] == ["company_buyer"]

    @pytest.mark.parametrize("client_fixture", ["customer_client", "employee_client"])
    def test_non_admins_are_forbidden(self, request, client_fixture):
        client = request.getfixturevalue(client_fixture)
        assert client.get(USERS_URL).status_code == 403


class TestRoleManagement:
    def test_get_role_view(self, admin_client, customer, company):
        response = admin_client.get(f"{USERS_URL}{customer.pk}/role/")

        assert response.status_code == 200
        assert response.data["role"] == Role.CUSTOMER
        assert response.data["roles"] == list(Role.values)
        assert response.data["companies"] == [{"id": str(company.id), "name": "Readers Club"}]

    def test_promote_to_company(self, admin_client, customer, company):
        response = admin_client.post(
            f"{USERS_URL}{customer.pk}/role/",
            {"role": Role.COMPANY, "company_id": str(company.id)},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["role"] == Role.COMPANY
        assert response.json()["company_id"] == str(company.id)

    def test_company_role_without_company_is_400(self, admin_client, customer):
        response = admin_client.post(
            f"{USERS_URL}{customer.pk}/role/", {"role": Role.COMPANY}, format="json"
        )
        assert response.status_code == 400

    def test_unknown_user_is_404(self, admin_client, roles):
        response = admin_client.get(f"{USERS_URL}00000000-0000-7000-8000-000000000000/role/")
        assert response.status_code == 404


class TestLockUnlock:
    def test_toggle(self, admin_client, customer):
        url = f"{USERS_URL}{customer.pk}/lock-unlock/"

        locked = admin_client.post(url)
        assert locked.status_code == 200
        assert locked.data["success"] is True
        assert locked.data["message"] == "Operation Successful"
        assert locked.data["locked"] is True

        unlocked = admin_client.post(url)
        assert unlocked.data["locked"] is False

    def test_unknown_user(self, admin_client):
        response = admin_client.post(
            f"{USERS_URL}00000000-0000-7000-8000-000000000000/lock-unlock/"
        )
        assert response.status_code == 404
        assert response.data == {"success": False, "message": "Error while Locking/Unlocking"}
