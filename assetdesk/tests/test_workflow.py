"""Тесты движка заявок и выдачи на уровне сервисов"""
import pytest

from assetdesk.core.errors import (
    CapacityExceededError,
    ConflictError,
    ExhaustedError,
    NotFoundError,
)
from assetdesk.modules.assets.models import (
    Asset,
    AssetRequest,
    AssignedAsset,
    AssignmentStatus,
    ProductType,
    RequestStatus,
)
from assetdesk.modules.assets.services.workflow import (
    assign_asset,
    decide_request,
    remove_employee,
    return_asset,
    submit_request,
)
from assetdesk.modules.hr.models.employee import EmployeeAffiliation
from assetdesk.modules.hr.models.user import User


def make_hr(db, email="hr@acme.com", company="Acme", package_limit=5, current_employees=0):
    hr = User(
        email=email,
        name="HR",
        role="hr",
        company_name=company,
        package_limit=package_limit,
        current_employees=current_employees,
    )
    db.add(hr)
    db.commit()
    return hr


def make_employee(db, email="ivan@mail.com", name="Ivan"):
    user = User(email=email, name=name, role="employee")
    db.add(user)
    db.commit()
    return user


def make_asset(db, hr, quantity=3, product_type=ProductType.RETURNABLE, name="Laptop"):
    asset = Asset(
        product_name=name,
        product_type=product_type.value,
        product_quantity=quantity,
        available_quantity=quantity,
        hr_email=hr.email,
        company_name=hr.company_name,
    )
    db.add(asset)
    db.commit()
    return asset


def affiliate(db, hr, employee):
    req = submit_request(db, make_asset(db, hr, name="Badge").id, employee)
    decide_request(db, req.id, RequestStatus.APPROVED, hr)


def affiliations(db, email):
    return db.query(EmployeeAffiliation).filter(EmployeeAffiliation.employee_email == email).all()


def test_second_pending_request_conflicts(db):
    hr, employee = make_hr(db), make_employee(db)
    asset = make_asset(db, hr)

    submit_request(db, asset.id, employee)
    with pytest.raises(ConflictError):
        submit_request(db, asset.id, employee)

    assert db.query(AssetRequest).count() == 1


def test_request_after_rejection_allowed(db):
    hr, employee = make_hr(db), make_employee(db)
    asset = make_asset(db, hr)

    req = submit_request(db, asset.id, employee)
    decide_request(db, req.id, RequestStatus.REJECTED, hr)
    again = submit_request(db, asset.id, employee)
    assert again.status == RequestStatus.PENDING.value


def test_request_unknown_asset(db):
    with pytest.raises(NotFoundError):
        submit_request(db, 999, make_employee(db))


def test_approval_creates_single_affiliation(db):
    hr, employee = make_hr(db), make_employee(db)
    first, second = make_asset(db, hr), make_asset(db, hr, name="Mouse")

    for asset in (first, second):
        req = submit_request(db, asset.id, employee)
        decided = decide_request(db, req.id, RequestStatus.APPROVED, hr)
        assert decided.status == RequestStatus.APPROVED.value
        assert decided.approval_date is not None
        assert decided.processed_by == hr.email

    rows = affiliations(db, employee.email)
    assert len(rows) == 1
    assert rows[0].company_name == "Acme"
    assert rows[0].hr_email == hr.email


def test_rejection_creates_no_affiliation(db):
    hr, employee = make_hr(db), make_employee(db)
    req = submit_request(db, make_asset(db, hr).id, employee)

    decided = decide_request(db, req.id, RequestStatus.REJECTED, hr)
    assert decided.status == RequestStatus.REJECTED.value
    assert decided.approval_date is None
    assert affiliations(db, employee.email) == []


def test_decided_request_cannot_be_decided_again(db):
    hr, employee = make_hr(db), make_employee(db)
    req = submit_request(db, make_asset(db, hr).id, employee)
    decide_request(db, req.id, RequestStatus.REJECTED, hr)

    with pytest.raises(ConflictError):
        decide_request(db, req.id, RequestStatus.APPROVED, hr)
    assert affiliations(db, employee.email) == []


def test_other_company_cannot_decide(db):
    hr, employee = make_hr(db), make_employee(db)
    other = make_hr(db, email="hr@globex.com", company="Globex")
    req = submit_request(db, make_asset(db, hr).id, employee)

    with pytest.raises(NotFoundError):
        decide_request(db, req.id, RequestStatus.APPROVED, other)


def test_capacity_exceeded_leaves_quantity_untouched(db):
    hr = make_hr(db, package_limit=2, current_employees=0)
    employee = make_employee(db)
    affiliate(db, hr, employee)
    asset = make_asset(db, hr, quantity=1)
    hr.current_employees = 2
    db.commit()

    with pytest.raises(CapacityExceededError):
        assign_asset(db, asset.id, employee.email, hr)

    db.refresh(asset)
    db.refresh(hr)
    assert asset.available_quantity == 1
    assert hr.current_employees == 2
    assert db.query(AssignedAsset).count() == 0
    assert affiliations(db, employee.email)[0].holds_seat is False


def test_counter_never_exceeds_limit(db):
    hr = make_hr(db, package_limit=2)
    asset = make_asset(db, hr, quantity=10)
    employees = [make_employee(db, email=f"e{i}@mail.com", name=f"E{i}") for i in range(4)]
    for e in employees:
        affiliate(db, hr, e)

    results = []
    for e in employees:
        try:
            assign_asset(db, asset.id, e.email, hr)
            results.append("ok")
        except CapacityExceededError:
            results.append("capacity")
        db.refresh(hr)
        assert hr.current_employees <= hr.package_limit

    assert results == ["ok", "ok", "capacity", "capacity"]
    db.refresh(asset)
    assert asset.available_quantity == 8


def test_second_assignment_to_same_employee_uses_no_seat(db):
    hr, employee = make_hr(db, package_limit=1), make_employee(db)
    affiliate(db, hr, employee)
    laptop, mouse = make_asset(db, hr), make_asset(db, hr, name="Mouse")

    assign_asset(db, laptop.id, employee.email, hr)
    assign_asset(db, mouse.id, employee.email, hr)

    db.refresh(hr)
    assert hr.current_employees == 1


def test_repeat_assignment_conflicts(db):
    hr, employee = make_hr(db), make_employee(db)
    affiliate(db, hr, employee)
    asset = make_asset(db, hr, quantity=1)

    assign_asset(db, asset.id, employee.email, hr)
    with pytest.raises(ConflictError):
        assign_asset(db, asset.id, employee.email, hr)

    db.refresh(asset)
    assert asset.available_quantity == 0


def test_exhausted_asset(db):
    hr, employee = make_hr(db), make_employee(db)
    affiliate(db, hr, employee)
    asset = make_asset(db, hr, quantity=0)

    with pytest.raises(ExhaustedError):
        assign_asset(db, asset.id, employee.email, hr)
    db.refresh(hr)
    assert hr.current_employees == 0


def test_assign_requires_affiliation(db):
    hr, employee = make_hr(db), make_employee(db)
    asset = make_asset(db, hr)

    with pytest.raises(NotFoundError):
        assign_asset(db, asset.id, employee.email, hr)
    with pytest.raises(NotFoundError):
        assign_asset(db, 999, employee.email, hr)


def test_return_restocks_returnable_only(db):
    hr, employee = make_hr(db), make_employee(db)
    affiliate(db, hr, employee)
    laptop = make_asset(db, hr, quantity=1)
    paper = make_asset(db, hr, quantity=1, product_type=ProductType.NON_RETURNABLE, name="Paper")

    laptop_assignment = assign_asset(db, laptop.id, employee.email, hr)
    paper_assignment = assign_asset(db, paper.id, employee.email, hr)

    returned = return_asset(db, laptop_assignment.id, employee)
    assert returned.status == AssignmentStatus.RETURNED.value
    assert returned.returned_at is not None
    db.refresh(laptop)
    assert laptop.available_quantity == 1

    with pytest.raises(ConflictError):
        return_asset(db, laptop_assignment.id, employee)
    with pytest.raises(ConflictError):
        return_asset(db, paper_assignment.id, employee)

    stranger = make_employee(db, email="olga@mail.com", name="Olga")
    with pytest.raises(NotFoundError):
        return_asset(db, paper_assignment.id, stranger)


def test_remove_employee_restores_everything(db):
    hr, employee = make_hr(db), make_employee(db)
    laptop, mouse = make_asset(db, hr, quantity=2), make_asset(db, hr, quantity=5, name="Mouse")

    for asset in (laptop, mouse):
        req = submit_request(db, asset.id, employee)
        decide_request(db, req.id, RequestStatus.APPROVED, hr)
    first = assign_asset(db, laptop.id, employee.email, hr)
    assign_asset(db, mouse.id, employee.email, hr)
    return_asset(db, first.id, employee)

    result = remove_employee(db, employee.email, hr)

    assert result["restocked"] == 1
    assert result["assignments_deleted"] == 2
    assert result["requests_reset"] == 2
    assert result["current_employees"] == 0
    db.refresh(laptop)
    db.refresh(mouse)
    assert laptop.available_quantity == 2
    assert mouse.available_quantity == 5
    assert db.query(AssignedAsset).count() == 0
    assert affiliations(db, employee.email) == []
    statuses = {r.status for r in db.query(AssetRequest).all()}
    assert statuses == {RequestStatus.PENDING.value}


def test_remove_keeps_single_pending_per_asset(db):
    hr, employee = make_hr(db), make_employee(db)
    asset = make_asset(db, hr)

    for _ in range(2):
        req = submit_request(db, asset.id, employee)
        decide_request(db, req.id, RequestStatus.APPROVED, hr)

    result = remove_employee(db, employee.email, hr)
    assert result["requests_reset"] == 1
    rows = db.query(AssetRequest).filter(AssetRequest.asset_id == asset.id).all()
    assert [r.status for r in rows] == [RequestStatus.PENDING.value]


def test_remove_without_assignments_keeps_counter(db):
    hr = make_hr(db, current_employees=1)
    employee = make_employee(db)
    affiliate(db, hr, employee)

    result = remove_employee(db, employee.email, hr)
    assert result["current_employees"] == 1


def test_remove_unknown_employee(db):
    with pytest.raises(NotFoundError):
        remove_employee(db, "ghost@mail.com", make_hr(db))


def test_remove_frees_seat_of_assigning_hr(db):
    first = make_hr(db)
    second = make_hr(db, email="hr2@acme.com", current_employees=1)
    employee = make_employee(db)
    affiliate(db, first, employee)
    assign_asset(db, make_asset(db, first).id, employee.email, first)
    assert affiliations(db, employee.email)[0].seat_hr_email == first.email

    remove_employee(db, employee.email, second)

    db.refresh(first)
    db.refresh(second)
    assert first.current_employees == 0
    assert second.current_employees == 1
