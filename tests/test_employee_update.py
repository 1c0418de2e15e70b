from datetime import date

from fastapi.testclient import TestClient

from app.main import app
from app.models.employee import Employee
from app.models.employee_records import EmergencyContact, SalaryLine
from tests.helpers import (
    add_emergency_contact,
    add_salary_line,
    create_allowance_type,
    create_designation,
    create_employee,
    create_role,
    fresh,
)


def test_update_only_allow_listed_fields(db_session):
    """Unknown and protected keys are dropped; only email changes"""
    e = create_employee(db_session, "Jane", "Doe", email="jane@example.com")

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={"email": "x@y.com", "id": 999, "uid": "hijack", "version": 42, "created_at": "2000-01-01"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Employee updated successfully"
    assert body["data"]["id"] == e.id
    assert body["data"]["email"] == "x@y.com"

    row = fresh(db_session, Employee, e.id)
    assert row.email == "x@y.com"
    assert row.uid == e.uid
    assert row.first_name == "Jane"
    assert row.created_at == e.created_at
    assert db_session.get(Employee, 999) is None


def test_update_email_collision(db_session):
    a = create_employee(db_session, "Jane", "Doe", email="a@example.com")
    b = create_employee(db_session, "John", "Roe", email="b@example.com")

    client = TestClient(app)
    r = client.put(f"/employees/{a.id}", json={"email": "b@example.com", "first_name": "Changed"})
    assert r.status_code == 400
    assert r.json()["error"] == "Email already in use"

    row = fresh(db_session, Employee, a.id)
    assert row.email == "a@example.com"
    assert row.first_name == "Jane"
    assert row.version == 1
    assert fresh(db_session, Employee, b.id).email == "b@example.com"


def test_update_keeping_own_email_is_allowed(db_session):
    e = create_employee(db_session, "Jane", "Doe", email="jane@example.com")

    client = TestClient(app)
    r = client.put(f"/employees/{e.id}", json={"email": "jane@example.com", "last_name": "Smith"})
    assert r.status_code == 200
    assert r.json()["data"]["last_name"] == "Smith"


def test_update_email_of_deleted_employee_can_be_reused(db_session):
    gone = create_employee(db_session, "Old", "Timer", email="reuse@example.com")
    e = create_employee(db_session, "Jane", "Doe")

    client = TestClient(app)
    assert client.delete(f"/employees/{gone.id}").status_code == 200
    r = client.put(f"/employees/{e.id}", json={"email": "reuse@example.com"})
    assert r.status_code == 200


def test_update_missing_employee_is_404():
    client = TestClient(app)
    r = client.put("/employees/4242", json={"first_name": "Ghost"})
    assert r.status_code == 404


def test_required_columns_cannot_be_blanked(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    for body in ({"first_name": None}, {"last_name": "   "}, {"email": ""}):
        r = client.put(f"/employees/{e.id}", json=body)
        assert r.status_code == 400, body

    assert fresh(db_session, Employee, e.id).first_name == "Jane"


def test_update_coerces_form_values(db_session):
    d = create_designation(db_session)
    role = create_role(db_session)
    e = create_employee(db_session, designation=d, role=role, dob=date(1990, 1, 1))

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={
            "dob": "",
            "doj": "2024-05-01T00:00:00.000Z",
            "designation_master_id": "",
            "role_master_id": str(role.id),
            "department": "0",
            "vendor_id": "17",
            "status": "false",
        },
    )
    assert r.status_code == 200

    row = fresh(db_session, Employee, e.id)
    assert row.dob is None
    assert row.doj == date(2024, 5, 1)
    assert row.designation_master_id is None
    assert row.role_master_id == role.id
    assert row.department is None
    assert row.vendor_id == 17
    assert row.status is False


def test_update_rejects_non_numeric_foreign_key(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    r = client.put(f"/employees/{e.id}", json={"role_master_id": "manager"})
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "role_master_id"


def test_current_address_is_written_to_temp_address(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    r = client.put(f"/employees/{e.id}", json={"current_address": "12 Palm St"})
    assert r.status_code == 200
    assert r.json()["data"]["temp_address"] == "12 Palm St"

    # temp_address wins when both are sent
    r = client.put(
        f"/employees/{e.id}",
        json={"current_address": "ignored", "temp_address": "5 Dune Rd"},
    )
    assert r.json()["data"]["temp_address"] == "5 Dune Rd"


def test_date_of_birth_maps_to_dob(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    r = client.put(f"/employees/{e.id}", json={"date_of_birth": "1988-02-29"})
    assert r.status_code == 200
    assert r.json()["data"]["dob"] == "1988-02-29"

    # date_of_birth wins when both are sent
    r = client.put(f"/employees/{e.id}", json={"dob": "1970-01-01", "date_of_birth": "1991-07-15"})
    assert r.json()["data"]["dob"] == "1991-07-15"


# ---------- child collections ----------

def test_child_update_round_trips_and_keeps_other_fields(db_session):
    e = create_employee(db_session)
    contact = add_emergency_contact(db_session, e, name="Old Name", relationship="Friend", contact_number="111")

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={"emergencyContacts": [{"id": contact.id, "contact_number": "222"}]},
    )
    assert r.status_code == 200

    contacts = client.get(f"/employees/{e.id}").json()["data"]["emergencyContacts"]
    assert contacts == [
        {"id": contact.id, "name": "Old Name", "relationship": "Friend", "contact_number": "222"}
    ]


def test_jane_gets_her_first_emergency_contact(db_session):
    """Create, read empty collections, add one contact, read it back"""
    d = create_designation(db_session)
    role = create_role(db_session)

    client = TestClient(app)
    r = client.post(
        "/employees",
        json={
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
            "designation_master_id": d.id,
            "role_master_id": role.id,
        },
    )
    assert r.status_code == 201
    emp_id = r.json()["data"]["id"]

    data = client.get(f"/employees/{emp_id}").json()["data"]
    assert data["emergencyContacts"] == []

    r = client.put(
        f"/employees/{emp_id}",
        json={"emergencyContacts": [{"name": "John Doe", "relationship": "Brother", "contact_number": "555-0101"}]},
    )
    assert r.status_code == 200

    contacts = client.get(f"/employees/{emp_id}").json()["data"]["emergencyContacts"]
    assert len(contacts) == 1
    assert isinstance(contacts[0]["id"], int)
    assert contacts[0]["name"] == "John Doe"
    assert contacts[0]["relationship"] == "Brother"
    assert contacts[0]["contact_number"] == "555-0101"


def test_unsubmitted_and_keyless_items_are_left_alone(db_session):
    e = create_employee(db_session)
    existing = add_emergency_contact(db_session, e, name="Existing")

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={"emergencyContacts": [{"relationship": "Cousin"}], "familyInfo": []},
    )
    assert r.status_code == 200

    contacts = client.get(f"/employees/{e.id}").json()["data"]["emergencyContacts"]
    assert [c["id"] for c in contacts] == [existing.id]
    assert contacts[0]["relationship"] == "Spouse"


def test_bank_details_accepts_a_single_object(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={"bankDetails": {"bank_name": "HSBC", "bank_account_number": "0012345"}},
    )
    assert r.status_code == 200

    banks = client.get(f"/employees/{e.id}").json()["data"]["bankDetails"]
    assert len(banks) == 1
    assert banks[0]["bank_name"] == "HSBC"
    assert banks[0]["bank_account_number"] == "0012345"


def test_salary_lines(db_session):
    basic = create_allowance_type(db_session, "Basic")
    housing = create_allowance_type(db_session, "Housing")
    e = create_employee(db_session)
    line = add_salary_line(db_session, e, basic, amount="1000.00")

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={
            "salaryDetails": [
                # no allowance_type_id: skipped
                {"id": line.id, "allowance_amount": 999},
                {"allowance_type_id": housing.id, "allowance_amount": "1500.50"},
            ]
        },
    )
    assert r.status_code == 200

    assert float(fresh(db_session, SalaryLine, line.id).amount) == 1000.0

    lines = client.get(f"/employees/{e.id}").json()["data"]["salaryDetails"]
    assert [(s["allowanceTypeName"], s["allowance_amount"]) for s in lines] == [
        ("Basic", 1000.0),
        ("Housing", 1500.5),
    ]

    r = client.put(
        f"/employees/{e.id}",
        json={"salaryDetails": [{"id": line.id, "allowance_type_id": basic.id, "allowance_amount": 1200}]},
    )
    assert r.status_code == 200
    assert float(fresh(db_session, SalaryLine, line.id).amount) == 1200.0


def test_foreign_child_id_is_404_and_nothing_is_written(db_session):
    owner = create_employee(db_session, "Jane", "Doe")
    other = create_employee(db_session, "John", "Roe", email="john@example.com")
    contact = add_emergency_contact(db_session, owner, name="Sam")

    client = TestClient(app)
    r = client.put(
        f"/employees/{other.id}",
        json={
            "email": "changed@example.com",
            "emergencyContacts": [{"id": contact.id, "name": "Hijacked"}],
        },
    )
    assert r.status_code == 404
    assert r.json()["error"] == f"Emergency contact {contact.id} not found for this employee"

    assert fresh(db_session, Employee, other.id).email == "john@example.com"
    assert fresh(db_session, EmergencyContact, contact.id).name == "Sam"


def test_parent_and_children_commit_together(db_session):
    e = create_employee(db_session)
    contact = add_emergency_contact(db_session, e, name="Sam")

    client = TestClient(app)
    r = client.put(
        f"/employees/{e.id}",
        json={
            "first_name": "Janet",
            "emergencyContacts": [
                {"id": contact.id, "name": "Samuel"},
                {"name": "Ana", "relationship": "Sister"},
            ],
        },
    )
    assert r.status_code == 200

    data = client.get(f"/employees/{e.id}").json()["data"]
    assert data["first_name"] == "Janet"
    assert [c["name"] for c in data["emergencyContacts"]] == ["Samuel", "Ana"]


# ---------- optimistic locking ----------

def test_if_match_guards_against_lost_updates(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    etag = client.get(f"/employees/{e.id}").headers["ETag"]
    assert etag == '"1"'

    r = client.put(f"/employees/{e.id}", json={"first_name": "Janet"}, headers={"If-Match": etag})
    assert r.status_code == 200
    assert r.headers["ETag"] == '"2"'
    assert r.json()["data"]["version"] == 2

    # a second writer still holding version 1
    r = client.put(f"/employees/{e.id}", json={"first_name": "Jenny"}, headers={"If-Match": etag})
    assert r.status_code == 409
    body = r.json()
    assert body["error"] == "Stale version"
    assert body["details"]["expected"] == 2
    assert body["details"]["got"] == 1
    assert fresh(db_session, Employee, e.id).first_name == "Janet"


def test_if_match_is_optional(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    r = client.put(f"/employees/{e.id}", json={"first_name": "Janet"})
    assert r.status_code == 200
    assert r.headers["ETag"] == '"2"'


def test_invalid_if_match_header(db_session):
    e = create_employee(db_session)

    client = TestClient(app)
    r = client.put(f"/employees/{e.id}", json={"first_name": "Janet"}, headers={"If-Match": "abc"})
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid If-Match header (expected integer version)"
