from fastapi.testclient import TestClient

PROFILE = "/api/v1/profile/me"


class TestProfile:
    def test_read_me(self, client: TestClient, headers, consumer):
        response = client.get(PROFILE, headers=headers(consumer))

        assert response.status_code == 200
        assert response.json()["role"] == "consumer"

    def test_update_me(self, client: TestClient, headers, consumer):
        response = client.patch(
            PROFILE,
            json={"full_name": "Aisyah binti Rahman", "phone": "012-345 6789"},
            headers=headers(consumer),
        )

        data = response.json()
        assert data["full_name"] == "Aisyah binti Rahman"
        assert data["phone"] == "012-345 6789"

    def test_role_is_not_editable(self, client: TestClient, headers, consumer):
        response = client.patch(PROFILE, json={"role": "admin"}, headers=headers(consumer))

        assert response.status_code == 422

    def test_invalid_phone(self, client: TestClient, headers, consumer):
        response = client.patch(PROFILE, json={"phone": "12345"}, headers=headers(consumer))

        assert response.status_code == 422

    def test_pending_vendor_sees_own_profile(self, client: TestClient, headers, pending_vendor):
        response = client.get(PROFILE, headers=headers(pending_vendor))

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "vendor"
        assert data["is_approved"] is False

    def test_pending_vendor_still_locked_out_of_vendor_area(
        self, client: TestClient, headers, pending_vendor
    ):
        response = client.get("/api/v1/vendor/products", headers=headers(pending_vendor))

        assert response.status_code == 403
        assert response.json()["detail"] == "Vendor account is pending approval"
