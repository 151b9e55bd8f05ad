"""
Tests d'intégration API pour les élèves.
Testent les URLs, les codes HTTP, la validation et le format des réponses ;
le service est patché.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from school_admin.exceptions import BadRequestError, InternalError, NotFoundError
from school_admin.main import app
from school_admin.repositories.students import DuplicateEmailError

SERVICE = "school_admin.routers.students.student_service"


def make_detail(**kwargs):
    data = {
        "id": 1,
        "name": "Ana",
        "email": "ana@school.com",
        "lastLogin": None,
        "systemAccess": True,
        "class": "5",
        "section": "A",
        "roll": 3,
        "phone": None,
        "gender": "F",
        "dob": "2012-03-01",
        "fatherName": "João",
        "fatherPhone": None,
        "motherName": None,
        "motherPhone": None,
        "guardianName": None,
        "guardianPhone": None,
        "relationOfGuardian": None,
        "currentAddress": None,
        "permanentAddress": None,
        "admissionDate": None,
        "reporterName": "Mme Costa",
    }
    data.update(kwargs)
    return data


# ============================================================
# GET /api/v1/students
# ============================================================

def test_liste_succes(client):
    rows = [
        {"id": 6, "name": "Ana 6", "email": "ana6@school.com", "lastLogin": None,
         "systemAccess": False, "class": "5", "section": "A", "roll": 6},
    ]
    with patch(f"{SERVICE}.get_all_students") as mock:
        mock.return_value = {
            "success": True,
            "data": rows,
            "pagination": {"total": 6, "page": 2, "limit": 5, "totalPages": 2},
        }
        response = client.get("/api/v1/students?page=2&limit=5&search=ana&class=5&section=A")

    assert response.status_code == 200
    body = response.json()
    assert body["data"][0]["class"] == "5"
    assert body["data"][0]["systemAccess"] is False
    assert body["pagination"]["totalPages"] == 2
    assert mock.call_args.kwargs == {
        "page": 2, "limit": 5, "search": "ana", "class_filter": "5", "section_filter": "A",
    }


def test_liste_valeurs_par_defaut(client):
    with patch(f"{SERVICE}.get_all_students") as mock:
        mock.return_value = {
            "success": True,
            "data": [],
            "pagination": {"total": 0, "page": 1, "limit": 10, "totalPages": 0},
        }
        response = client.get("/api/v1/students")

    assert response.status_code == 200
    assert mock.call_args.kwargs == {
        "page": 1, "limit": 10, "search": "", "class_filter": None, "section_filter": None,
    }


@pytest.mark.parametrize("query", ["page=0", "limit=0", "page=abc"])
def test_liste_pagination_invalide(client, query):
    response = client.get(f"/api/v1/students?{query}")
    assert response.status_code == 422


# ============================================================
# GET /api/v1/students/{id}
# ============================================================

def test_detail_succes(client):
    with patch(f"{SERVICE}.get_student_detail") as mock:
        mock.return_value = {"success": True, "data": make_detail()}
        response = client.get("/api/v1/students/1")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["reporterName"] == "Mme Costa"
    assert data["fatherName"] == "João"
    assert data["dob"] == "2012-03-01"
    mock.assert_called_once()
    assert mock.call_args.args[1] == 1


@pytest.mark.parametrize("bad_id", ["abc", "0", "-3", "1.5", "%C2%B2", "%D9%A3"])
def test_detail_id_invalide(client, bad_id):
    with patch(f"{SERVICE}.get_student_detail") as mock:
        response = client.get(f"/api/v1/students/{bad_id}")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Valid student ID is required"}
    mock.assert_not_called()


def test_detail_introuvable(client):
    with patch(f"{SERVICE}.get_student_detail", side_effect=NotFoundError("Student not found")):
        response = client.get("/api/v1/students/99")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Student not found"}


# ============================================================
# POST /api/v1/students
# ============================================================

def test_creation_succes(client):
    with patch(f"{SERVICE}.add_new_student") as mock:
        mock.return_value = {
            "success": True,
            "data": {"userId": 42, "message": "Student added"},
            "message": "Student added and verification email sent successfully.",
        }
        response = client.post("/api/v1/students", json={
            "name": "Ana", "email": "ana@school.com", "class_name": "5",
            "section_name": "A", "roll": 3, "dob": "2012-03-01",
        })

    assert response.status_code == 201
    assert response.json()["data"]["userId"] == 42
    payload = mock.call_args.args[1]
    assert payload["email"] == "ana@school.com"
    assert payload["dob"] == "2012-03-01"


def test_creation_email_non_envoye(client):
    with patch(f"{SERVICE}.add_new_student") as mock:
        mock.return_value = {
            "success": True,
            "data": {"userId": 42, "message": None},
            "message": "Student added, but failed to send verification email.",
        }
        response = client.post("/api/v1/students", json={"name": "Ana", "email": "ana@school.com"})

    assert response.status_code == 201
    assert response.json()["success"] is True
    assert "failed to send" in response.json()["message"]


def test_creation_validation(client):
    with patch(f"{SERVICE}.add_new_student") as mock:
        response = client.post("/api/v1/students", json={"name": "  ", "email": "pas-un-email"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"] == {"name": "Name is required", "email": "Valid email is required"}
    mock.assert_not_called()


def test_creation_nom_non_textuel(client):
    """Un nom non textuel est rejeté par le validateur (400 + détail par champ), pas par pydantic."""
    with patch(f"{SERVICE}.add_new_student") as mock:
        response = client.post("/api/v1/students", json={"name": 123, "email": "a@b.co"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"] == {"name": "Name is required"}
    mock.assert_not_called()


def test_creation_email_non_textuel(client):
    response = client.post("/api/v1/students", json={"name": "Ana", "email": ["a@b.co"]})
    assert response.status_code == 400
    assert response.json()["errors"] == {"email": "Valid email is required"}


def test_creation_email_duplique(client):
    with patch(f"{SERVICE}.add_new_student", side_effect=DuplicateEmailError("ana@school.com")):
        response = client.post("/api/v1/students", json={"name": "Ana", "email": "ana@school.com"})
    assert response.status_code == 409
    assert response.json()["message"] == "A student with this email already exists"


def test_creation_echec_interne(client):
    with patch(f"{SERVICE}.add_new_student", side_effect=InternalError("Unable to add student")):
        response = client.post("/api/v1/students", json={"name": "Ana", "email": "ana@school.com"})
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Unable to add student"}


# ============================================================
# PUT /api/v1/students/{id}
# ============================================================

def test_mise_a_jour_succes(client):
    with patch(f"{SERVICE}.update_student") as mock:
        mock.return_value = {
            "success": True,
            "message": "Student updated successfully",
            "updated": {"id": 1, "name": "Ana Maria", "email": "ana@school.com"},
        }
        response = client.put("/api/v1/students/1", json={"name": "Ana Maria"})

    assert response.status_code == 200
    assert response.json()["updated"]["name"] == "Ana Maria"
    assert mock.call_args.args[1:] == (1, {"name": "Ana Maria", "email": None})


def test_mise_a_jour_sans_champ(client):
    with patch(f"{SERVICE}.update_student",
               side_effect=BadRequestError("At least one field (name or email) must be provided for update")):
        response = client.put("/api/v1/students/1", json={})
    assert response.status_code == 400


def test_mise_a_jour_id_invalide(client):
    response = client.put("/api/v1/students/abc", json={"name": "X"})
    assert response.status_code == 400


def test_mise_a_jour_introuvable(client):
    with patch(f"{SERVICE}.update_student", side_effect=NotFoundError("Student not found")):
        response = client.put("/api/v1/students/9", json={"name": "X"})
    assert response.status_code == 404


def test_mise_a_jour_email_duplique(client):
    with patch(f"{SERVICE}.update_student", side_effect=DuplicateEmailError("x@y.z")):
        response = client.put("/api/v1/students/1", json={"email": "x@y.z"})
    assert response.status_code == 409
    assert response.json()["message"] == "Email already in use"


# ============================================================
# PATCH /api/v1/students/{id}/status
# ============================================================

def test_statut_succes(client):
    with patch(f"{SERVICE}.set_student_status") as mock:
        mock.return_value = {"success": True, "message": "Student status changed successfully"}
        response = client.patch("/api/v1/students/1/status", json={"is_active": False})

    assert response.status_code == 200
    assert mock.call_args.args[1:] == (1, False)


@pytest.mark.parametrize("body", [{"is_active": "true"}, {"is_active": 1}, {}, {"is_active": None}])
def test_statut_non_booleen(client, body):
    with patch(f"{SERVICE}.set_student_status") as mock:
        response = client.patch("/api/v1/students/1/status", json=body)
    assert response.status_code == 400
    assert response.json()["message"] == "is_active must be a boolean value (true/false)"
    mock.assert_not_called()


def test_statut_sans_corps(client):
    with patch(f"{SERVICE}.set_student_status") as mock:
        response = client.patch("/api/v1/students/1/status")
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "is_active must be a boolean value (true/false)",
    }
    mock.assert_not_called()


def test_statut_introuvable(client):
    with patch(f"{SERVICE}.set_student_status", side_effect=NotFoundError("Student not found")):
        response = client.patch("/api/v1/students/1/status", json={"is_active": True})
    assert response.status_code == 404


# ============================================================
# DELETE /api/v1/students/{id}
# ============================================================

def test_suppression_succes(client):
    with patch(f"{SERVICE}.delete_student") as mock:
        mock.return_value = {"success": True, "message": "Student deleted successfully"}
        response = client.delete("/api/v1/students/1")
    assert response.status_code == 200
    assert response.json()["message"] == "Student deleted successfully"


def test_suppression_introuvable(client):
    with patch(f"{SERVICE}.delete_student", side_effect=NotFoundError("Student not found")):
        response = client.delete("/api/v1/students/1")
    assert response.status_code == 404
    assert response.json()["message"] == "Student not found"


def test_suppression_id_invalide(client):
    response = client.delete("/api/v1/students/x1")
    assert response.status_code == 400


# ============================================================
# Erreurs non gérées et santé
# ============================================================

def test_erreur_sql_message_generique():
    """Une erreur inattendue renvoie un 500 générique, sans détail interne."""
    from school_admin.database import get_db
    from unittest.mock import MagicMock

    app.dependency_overrides[get_db] = lambda: MagicMock()
    with TestClient(app, raise_server_exceptions=False) as c:
        with patch(f"{SERVICE}.get_all_students", side_effect=RuntimeError("relation users does not exist")):
            response = c.get("/api/v1/students")
    app.dependency_overrides.clear()

    assert response.status_code == 500
    assert "relation" not in response.text
    assert response.json()["success"] is False


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
