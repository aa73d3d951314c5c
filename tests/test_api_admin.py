"""
Testes da API de Administração
==============================
Dashboard, usuários e lojas (CRUD, filtros, conflitos e perfil)
"""

import pytest

from src.core import models
from src.core.utils.enums import UserRole


@pytest.fixture
def headers(admin, auth_headers):
    return auth_headers(admin)


# ═══════════════════════════════════════════════════════════
# PERFIL
# ═══════════════════════════════════════════════════════════

class TestRoleGate:

    @pytest.mark.parametrize("path", ["/api/admin/dashboard", "/api/admin/users", "/api/admin/stores"])
    def test_non_admin_forbidden(self, client, normal_user, auth_headers, path):
        response = client.get(path, headers=auth_headers(normal_user))

        assert response.status_code == 403
        assert response.json()["message"] == "User role user is not authorized to access this route"

    def test_anonymous_unauthorized(self, client):
        assert client.get("/api/admin/dashboard").status_code == 401


# ═══════════════════════════════════════════════════════════
# DASHBOARD
# ═══════════════════════════════════════════════════════════

def test_dashboard_counts(client, headers, owner, normal_user, make_user, make_store, make_rating):
    store = make_store(owner)
    make_store(make_user(role=UserRole.STORE_OWNER), is_active=False)
    make_user(is_active=False)
    make_rating(normal_user, store, 4)

    response = client.get("/api/admin/dashboard", headers=headers)

    assert response.status_code == 200
    # admin, owner, normal_user e o dono da loja inativa
    assert response.json() == {"totalUsers": 4, "totalStores": 1, "totalRatings": 1}


# ═══════════════════════════════════════════════════════════
# USUÁRIOS
# ═══════════════════════════════════════════════════════════

class TestUsers:

    def test_list_contract(self, client, headers, normal_user):
        response = client.get("/api/admin/users", params={"sortBy": "name", "sortOrder": "asc"}, headers=headers)

        assert response.status_code == 200
        body = response.json()
        assert [u["name"] for u in body["users"]] == ["Platform Admin", "Regular Customer"]
        assert body["pagination"] == {
            "currentPage": 1, "totalPages": 1, "totalCount": 2,
            "hasNextPage": False, "hasPrevPage": False,
        }

    def test_invalid_sort_field_rejected(self, client, headers):
        response = client.get("/api/admin/users", params={"sortBy": "hashedPassword"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "sortBy"

    def test_non_numeric_page_rejected(self, client, headers):
        response = client.get("/api/admin/users", params={"page": "abc"}, headers=headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "page"

    def test_inactive_hidden_even_with_role_filter(self, client, headers, make_user):
        make_user(name="Retired Owner", role=UserRole.STORE_OWNER, is_active=False)
        active = make_user(name="Active Owner", role=UserRole.STORE_OWNER)

        response = client.get("/api/admin/users", params={"role": "store_owner"}, headers=headers)
        assert [u["id"] for u in response.json()["users"]] == [active.id]

        response = client.get(
            "/api/admin/users",
            params={"role": "store_owner", "includeInactive": "true"},
            headers=headers,
        )
        assert response.json()["pagination"]["totalCount"] == 2

    def test_search(self, client, headers, make_user):
        make_user(name="Zed Searchable", email="zed@sample.org")

        response = client.get("/api/admin/users", params={"search": "SAMPLE.ORG"}, headers=headers)

        assert [u["name"] for u in response.json()["users"]] == ["Zed Searchable"]

    def test_store_owners_carry_store_ratings(self, client, headers, owner, normal_user, make_store, make_rating):
        store = make_store(owner, name="Cafe A")
        make_rating(normal_user, store, 4)

        response = client.get("/api/admin/users", params={"role": "store_owner"}, headers=headers)

        listed = response.json()["users"][0]
        assert listed["stores"] == [{
            "id": store.id, "name": "Cafe A", "address": store.address,
            "averageRating": 4.0, "totalRatings": 1,
        }]

    def test_regular_users_have_no_stores_key_value(self, client, headers, normal_user):
        response = client.get(f"/api/admin/users/{normal_user.id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["stores"] is None

    def test_create_with_role(self, client, headers):
        response = client.post("/api/admin/users", headers=headers, json={
            "name": "Shop Keeper", "email": "keeper@example.com",
            "password": "Keeper#123", "address": "5 High St", "role": "store_owner",
        })

        assert response.status_code == 201
        assert response.json()["role"] == "store_owner"

    def test_create_duplicate_email(self, client, headers, normal_user):
        response = client.post("/api/admin/users", headers=headers, json={
            "name": "Copy Cat", "email": normal_user.email,
            "password": "Copy#1234", "address": "x",
        })

        assert response.status_code == 409
        assert response.json()["field"] == "email"

    def test_update(self, client, headers, normal_user):
        response = client.put(f"/api/admin/users/{normal_user.id}", headers=headers,
                              json={"name": "Renamed User", "role": "store_owner"})

        assert response.status_code == 200
        assert response.json()["name"] == "Renamed User"
        assert response.json()["role"] == "store_owner"

    def test_owner_with_active_store_keeps_role(self, client, db, headers, owner, make_store):
        store = make_store(owner)

        response = client.put(f"/api/admin/users/{owner.id}", headers=headers, json={"role": "user"})

        assert response.status_code == 409
        assert response.json()["field"] == "role"
        db.expire_all()
        assert db.get(models.User, owner.id).role == UserRole.STORE_OWNER
        assert client.get(f"/api/admin/stores/{store.id}", headers=headers).json()["ownerId"] == owner.id

    def test_owner_without_active_store_can_change_role(self, client, headers, owner, make_store):
        make_store(owner, is_active=False)

        response = client.put(f"/api/admin/users/{owner.id}", headers=headers, json={"role": "user"})

        assert response.status_code == 200
        assert response.json()["role"] == "user"

    def test_huge_page_rejected(self, client, headers):
        response = client.get("/api/admin/users", params={"page": 10 ** 17, "limit": 100}, headers=headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "page"

    def test_update_email_taken(self, client, headers, admin, normal_user):
        response = client.put(f"/api/admin/users/{normal_user.id}", headers=headers,
                              json={"email": admin.email})

        assert response.status_code == 409

    def test_status_toggle_and_soft_delete(self, client, db, headers, normal_user, make_rating, owner, make_store):
        rating = make_rating(normal_user, make_store(owner), 5)

        response = client.patch(f"/api/admin/users/{normal_user.id}/status", headers=headers,
                                json={"isActive": False})
        assert response.json()["isActive"] is False

        client.patch(f"/api/admin/users/{normal_user.id}/status", headers=headers, json={"isActive": True})
        response = client.delete(f"/api/admin/users/{normal_user.id}", headers=headers)
        assert response.status_code == 200

        db.expire_all()
        assert db.get(models.User, normal_user.id).is_active is False
        # Soft delete não remove avaliações
        assert db.get(models.Rating, rating.id) is not None

    def test_status_requires_boolean(self, client, headers, normal_user):
        response = client.patch(f"/api/admin/users/{normal_user.id}/status", headers=headers,
                                json={"isActive": "nope"})

        assert response.status_code == 400

    def test_missing_user(self, client, headers):
        response = client.get("/api/admin/users/9999", headers=headers)

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}


# ═══════════════════════════════════════════════════════════
# LOJAS
# ═══════════════════════════════════════════════════════════

STORE_PAYLOAD = {"name": "Cafe A", "email": "cafe.a@example.com", "address": "1 Bean Street"}


class TestStores:

    def test_create_by_owner_name(self, client, headers, owner):
        response = client.post("/api/admin/stores", headers=headers,
                               json={**STORE_PAYLOAD, "ownerName": "jane doe"})

        assert response.status_code == 201
        body = response.json()
        assert body["ownerId"] == owner.id
        assert body["owner"]["name"] == "Jane Doe"

    def test_create_by_owner_id(self, client, headers, owner):
        response = client.post("/api/admin/stores", headers=headers, json={**STORE_PAYLOAD, "ownerId": owner.id})

        assert response.status_code == 201

    def test_owner_required(self, client, headers):
        response = client.post("/api/admin/stores", headers=headers, json=STORE_PAYLOAD)

        assert response.status_code == 400

    def test_unknown_owner_name(self, client, headers):
        response = client.post("/api/admin/stores", headers=headers,
                               json={**STORE_PAYLOAD, "ownerName": "Nobody Here"})

        assert response.status_code == 404

    def test_owner_must_have_store_owner_role(self, client, headers, normal_user):
        response = client.post("/api/admin/stores", headers=headers,
                               json={**STORE_PAYLOAD, "ownerId": normal_user.id})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "ownerId"

    def test_ambiguous_owner_name(self, client, headers, make_user):
        make_user(name="Sam Smith", role=UserRole.STORE_OWNER)
        make_user(name="Sam Smith", role=UserRole.STORE_OWNER)

        response = client.post("/api/admin/stores", headers=headers,
                               json={**STORE_PAYLOAD, "ownerName": "Sam Smith"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "ownerName"

    def test_one_active_store_per_owner(self, client, headers, owner, make_store):
        make_store(owner)

        response = client.post("/api/admin/stores", headers=headers, json={**STORE_PAYLOAD, "ownerId": owner.id})

        assert response.status_code == 409
        assert response.json()["field"] == "ownerId"

    def test_reactivation_blocked_while_owner_has_active_store(self, client, headers, owner, make_store):
        old = make_store(owner, is_active=False)
        make_store(owner)

        response = client.patch(f"/api/admin/stores/{old.id}/status", headers=headers, json={"isActive": True})

        assert response.status_code == 409

    def test_duplicate_store_email(self, client, headers, owner, make_user, make_store):
        make_store(make_user(role=UserRole.STORE_OWNER), email=STORE_PAYLOAD["email"])

        response = client.post("/api/admin/stores", headers=headers, json={**STORE_PAYLOAD, "ownerId": owner.id})

        assert response.status_code == 409
        assert response.json()["field"] == "email"

    def test_list_with_ratings_and_inactive_filter(self, client, headers, owner, normal_user, make_user,
                                                   make_store, make_rating):
        store = make_store(owner, name="Cafe A")
        make_store(make_user(role=UserRole.STORE_OWNER), name="Closed", is_active=False)
        make_rating(normal_user, store, 5)

        body = client.get("/api/admin/stores", headers=headers).json()
        assert [(s["name"], s["averageRating"], s["totalRatings"]) for s in body["stores"]] == [("Cafe A", 5.0, 1)]

        body = client.get("/api/admin/stores", params={"includeInactive": "true"}, headers=headers).json()
        assert body["pagination"]["totalCount"] == 2

    def test_get_update_and_soft_delete(self, client, db, headers, owner, make_store):
        store = make_store(owner)

        assert client.get(f"/api/admin/stores/{store.id}", headers=headers).json()["totalRatings"] == 0

        response = client.put(f"/api/admin/stores/{store.id}", headers=headers, json={"name": "New Name"})
        assert response.json()["name"] == "New Name"

        assert client.delete(f"/api/admin/stores/{store.id}", headers=headers).status_code == 200
        db.expire_all()
        assert db.get(models.Store, store.id).is_active is False

    def test_missing_store(self, client, headers):
        assert client.put("/api/admin/stores/9999", headers=headers, json={"name": "Ghost"}).status_code == 404
