"""Route tests through the FastAPI app with store and session overrides."""

import pytest
from fastapi.testclient import TestClient

from src.admin.dependencies import get_vendor_store
from src.config import Settings, get_settings
from src.main import app
from src.members.dependencies import get_current_member


@pytest.fixture
def client(store):
    app.dependency_overrides[get_vendor_store] = lambda: store
    app.dependency_overrides[get_current_member] = lambda: None
    app.dependency_overrides[get_settings] = lambda: Settings(
        admin_username="admin",
        admin_password="s3cret",
        environment="development",
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_form(**overrides) -> dict:
    form = {
        "chemical_name": "Acetone",
        "category": "Solvent",
        "cas_no": "67-64-1",
        "supplier_name": "Supplier 4",
        "contact_info": "sales4@example.com",
        "phone_number": "+91 22 5550 0000",
        "business_status": "Active",
        "country": "India",
    }
    form.update(overrides)
    return form


def login(client: TestClient) -> None:
    response = client.post("/api/login", json={"username": "admin", "password": "s3cret"})
    assert response.status_code == 200


class TestAdminGate:
    def test_wrong_credentials(self, client):
        response = client.post("/api/login", json={"username": "wrong", "password": "wrong"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}
        assert "set-cookie" not in response.headers
        assert "admin-auth" not in client.cookies

    def test_valid_credentials_open_dashboard(self, client):
        response = client.post("/api/login", json={"username": "admin", "password": "s3cret"})
        assert response.json() == {"success": True}
        assert client.cookies.get("admin-auth") == "authenticated"

        dashboard = client.get("/dashboard", follow_redirects=False)
        assert dashboard.status_code == 200
        assert "Vendor Search" in dashboard.text

    def test_anonymous_dashboard_redirects(self, client):
        response = client.get("/dashboard", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_logout_clears_cookie(self, client):
        login(client)
        response = client.post("/api/logout", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert "admin-auth" not in client.cookies

    def test_logout_when_anonymous(self, client):
        response = client.post("/api/logout", follow_redirects=False)
        assert response.status_code == 303


class TestDashboard:
    def test_listing_partial_orders_by_sequence(self, client):
        login(client)
        response = client.get("/dashboard?page=2", headers={"HX-Request": "true"})
        assert response.status_code == 200
        assert 'id="vendor-11"' in response.text
        assert 'id="vendor-21"' not in response.text
        assert "Page 2 of 3" in response.text

    def test_next_sequence_shown(self, client):
        login(client)
        response = client.get("/dashboard")
        assert 'value="26"' in response.text

    def test_add_vendor(self, client, store):
        login(client)
        response = client.post(
            "/dashboard/vendors",
            data={
                "chemical_name": "Toluene",
                "category": "Solvent",
                "cas_no": "108-88-3",
                "supplier_name": "Acme",
                "contact_info": "sales@acme.example",
                "phone_number": "555",
                "business_status": "Active",
                "country": "USA",
            },
        )
        assert response.status_code == 200
        assert "Vendor added successfully!" in response.text
        assert store.rows["26"].chemical_name == "Toluene"
        assert 'value="27"' in response.text

    def test_add_vendor_missing_fields(self, client, store):
        login(client)
        response = client.post("/dashboard/vendors", data={"chemical_name": "Toluene"})
        assert "Please fill in all required fields" in response.text
        assert 'value="Toluene"' in response.text
        assert "26" not in store.rows

    def test_update_vendor(self, client, store, vendor_factory):
        login(client)
        edited = vendor_factory("4", country="Japan").model_dump(exclude={"sr_no"})
        response = client.post("/dashboard/vendors/4", data=edited)
        assert "Vendor updated successfully!" in response.text
        assert store.rows["4"].country == "Japan"

    def test_edit_form_renders(self, client):
        login(client)
        response = client.get("/dashboard/vendors/4/edit")
        assert response.status_code == 200
        assert 'hx-post="/dashboard/vendors/4"' in response.text
        assert 'value="4" readonly' in response.text
        assert 'name="sr_no"' not in response.text
        assert 'value="Supplier 4"' in response.text

    def test_listing_rows_have_edit_buttons(self, client):
        login(client)
        response = client.get("/dashboard", headers={"HX-Request": "true"})
        assert 'hx-get="/dashboard/vendors/1/edit"' in response.text

    def test_update_success_dismisses_after_delay(self, client):
        login(client)
        response = client.post("/dashboard/vendors/4", data=make_form(country="Japan"))
        assert "alert-success" in response.text
        assert 'hx-trigger="load delay:1500ms"' in response.text
        assert 'value="Japan"' in response.text

    def test_failed_update_keeps_stored_row(self, client, store):
        login(client)
        response = client.post("/dashboard/vendors/4", data={"chemical_name": "Toluene"})
        assert "Please fill in all required fields" in response.text
        assert "alert-error" in response.text
        assert "load delay" not in response.text
        assert store.rows["4"].chemical_name == "Acetone"

        row = client.get("/dashboard/vendors/4")
        assert "Acetone" in row.text
        assert "Toluene" not in row.text
        assert "<form" not in row.text

    def test_update_missing_vendor(self, client, store):
        login(client)
        response = client.post("/dashboard/vendors/99", data=make_form())
        assert "Error updating vendor. Please try again." in response.text
        assert "99" not in store.rows

    def test_row_for_deleted_vendor_is_empty(self, client):
        login(client)
        response = client.get("/dashboard/vendors/99")
        assert response.status_code == 200
        assert response.text == ""

    def test_delete_requires_confirmation(self, client, store):
        login(client)
        response = client.post("/dashboard/vendors/4/delete")
        assert response.status_code == 400
        assert "4" in store.rows

    def test_delete_vendor(self, client, store):
        login(client)
        response = client.post("/dashboard/vendors/4/delete", data={"confirm": "yes"})
        assert response.status_code == 200
        assert "4" not in store.rows

    def test_mutations_require_admin(self, client, store):
        response = client.post("/dashboard/vendors/4/delete", data={"confirm": "yes"})
        assert response.status_code == 401
        assert "4" in store.rows


class TestPublicSearch:
    def test_anonymous_sees_one_row(self, client):
        body = client.get("/api/vendors/search", params={"q": "acetone"}).json()
        assert len(body["results"]) == 1
        assert body["hidden_count"] == 9
        assert body["total_pages"] == 2
        assert body["authenticated"] is False

    def test_member_sees_full_page(self, client):
        app.dependency_overrides[get_current_member] = lambda: {"member_id": "m", "email": "e"}
        body = client.get("/api/vendors/search", params={"q": "acetone"}).json()
        assert len(body["results"]) == 10
        assert body["hidden_count"] == 0

    def test_blank_query_is_empty(self, client, store):
        body = client.get("/api/vendors/search", params={"q": "  "}).json()
        assert body["results"] == []
        assert store.search_calls == []

    def test_store_error_is_json(self, client, store):
        store.fail_on.add("search")
        response = client.get("/api/vendors/search", params={"q": "acetone"})
        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_results_partial(self, client):
        response = client.get("/search", params={"q": "benzene"})
        assert "Benzene" in response.text
        assert "9 more results" in response.text

    def test_home_page_pages_over_socket(self, client):
        body = client.get("/").text
        assert 'JSON.stringify({type: "page", page: target})' in body
        assert "Page ${page} of ${totalPages}" in body

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"
