"""Тесты команды HR: список сотрудников и удаление"""
from .conftest import API, add_asset, decide, login, register, request_asset


def hire(client, hr_headers, email, name):
    register(client, email, name=name)
    headers = login(client, email)
    asset = add_asset(client, hr_headers, f"Badge {name}", quantity=1)
    req = request_asset(client, headers, asset["id"])
    decide(client, hr_headers, req["id"])
    return headers, asset


def test_emlist_with_counts_and_search(client, hr_headers):
    _, badge = hire(client, hr_headers, "ivan@mail.com", "Ivan")
    hire(client, hr_headers, "olga@mail.com", "Olga")
    client.post(
        f"{API}/assign",
        json={"asset_id": badge["id"], "employee_email": "ivan@mail.com"},
        headers=hr_headers,
    )

    page = client.get(f"{API}/emlist", headers=hr_headers).json()
    assert page["total"] == 2
    counts = {e["employee_email"]: e["assigned_count"] for e in page["items"]}
    assert counts == {"ivan@mail.com": 1, "olga@mail.com": 0}

    found = client.get(f"{API}/emlist", params={"search": "olg"}, headers=hr_headers).json()
    assert [e["employee_name"] for e in found["items"]] == ["Olga"]

    limited = client.get(f"{API}/emlist", params={"limit": 1, "page": 1}, headers=hr_headers).json()
    assert [e["employee_name"] for e in limited["items"]] == ["Olga"]


def test_emlist_only_own_company(client, hr_headers):
    hire(client, hr_headers, "ivan@mail.com", "Ivan")
    register(client, "hr@globex.com", role="hr", company_name="Globex")
    globex = login(client, "hr@globex.com")
    assert client.get(f"{API}/emlist", headers=globex).json()["total"] == 0


def test_emdelete_unknown_employee(client, hr_headers):
    response = client.request(
        "DELETE", f"{API}/emdelete", json={"employee_email": "ghost@mail.com"}, headers=hr_headers
    )
    assert response.status_code == 404


def test_emdelete_frees_seat_for_next_employee(client, app, hr_headers):
    from assetdesk.modules.hr.models.user import User

    _, ivan_badge = hire(client, hr_headers, "ivan@mail.com", "Ivan")
    _, olga_badge = hire(client, hr_headers, "olga@mail.com", "Olga")

    db = app.state.db.session()
    try:
        db.query(User).filter(User.email == "hr@acme.com").update({User.package_limit: 1})
        db.commit()
    finally:
        db.close()

    def assign(asset, email):
        return client.post(
            f"{API}/assign", json={"asset_id": asset["id"], "employee_email": email}, headers=hr_headers
        )

    assert assign(ivan_badge, "ivan@mail.com").status_code == 201
    assert assign(olga_badge, "olga@mail.com").status_code == 402

    response = client.request(
        "DELETE", f"{API}/emdelete", json={"employee_email": "ivan@mail.com"}, headers=hr_headers
    )
    assert response.status_code == 200
    assert assign(olga_badge, "olga@mail.com").status_code == 201


def test_emdelete_by_colleague_frees_assigning_hr_seat(client, hr_headers):
    _, badge = hire(client, hr_headers, "ivan@mail.com", "Ivan")
    assert client.post(
        f"{API}/assign",
        json={"asset_id": badge["id"], "employee_email": "ivan@mail.com"},
        headers=hr_headers,
    ).status_code == 201
    assert client.get(f"{API}/auth/me", headers=hr_headers).json()["current_employees"] == 1

    register(client, "hr2@acme.com", role="hr", company_name="Acme")
    colleague = login(client, "hr2@acme.com")
    response = client.request(
        "DELETE", f"{API}/emdelete", json={"employee_email": "ivan@mail.com"}, headers=colleague
    )
    assert response.status_code == 200

    assert client.get(f"{API}/auth/me", headers=hr_headers).json()["current_employees"] == 0
    assert client.get(f"{API}/auth/me", headers=colleague).json()["current_employees"] == 0
