import pytest
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

from massage_api import create_app
from massage_api.common.errors import Internal, Unavailable
from massage_api.models.employee import Employee
from massage_api.store import StoreGateway


def _data(resp):
    body = resp.get_json()
    assert body["success"] is True, body
    return body["data"]


def _error(resp):
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["message"]
    return body["error"]


# ---------- employees ----------
def test_employee_rename_scenario(client):
    r = client.post("/api/employees", json={"name": "Somchai", "position": "Therapist"})
    assert r.status_code == 201
    assert _data(r) == {"id": "Somchai", "name": "Somchai", "position": "Therapist"}

    r = client.get("/api/employees/Somchai")
    assert r.status_code == 200
    assert _data(r)["position"] == "Therapist"

    r = client.put("/api/employees/Somchai", json={"name": "Somchai2", "position": "Therapist"})
    assert r.status_code == 200
    assert _data(r)["name"] == "Somchai2"

    assert client.get("/api/employees/Somchai").status_code == 404
    assert client.get("/api/employees/Somchai2").status_code == 200


def test_employee_errors(client):
    r = client.post("/api/employees", json={"position": "Therapist"})
    assert r.status_code == 400
    assert _error(r)["code"] == "INVALID_ARGUMENT"

    client.post("/api/employees", json={"name": "Nok"})
    r = client.post("/api/employees", json={"name": "Nok"})
    assert r.status_code == 409
    assert _error(r)["code"] == "CONFLICT"

    client.post("/api/employees", json={"name": "Ploy"})
    r = client.put("/api/employees/Ploy", json={"name": "Nok"})
    assert r.status_code == 409

    assert client.put("/api/employees/Ghost", json={"position": "x"}).status_code == 404
    assert client.delete("/api/employees/Ghost").status_code == 404

    r = client.post("/api/employees", json=["Nok"])
    assert r.status_code == 400


def test_employee_list_and_delete(client):
    client.post("/api/employees", json={"name": "Nok"})
    client.post("/api/employees", json={"name": "Ploy", "position": "Cashier"})

    r = client.get("/api/employees")
    assert [e["name"] for e in _data(r)] == ["Nok", "Ploy"]
    assert _data(r)[0]["position"] == "Staff"

    r = client.delete("/api/employees/Nok")
    assert r.status_code == 204
    assert client.delete("/api/employees/Nok").status_code == 404


def test_employee_name_with_slash_is_addressable(client):
    assert client.post("/api/employees", json={"name": "Nok/Ploy"}).status_code == 201

    r = client.get("/api/employees/Nok/Ploy")
    assert r.status_code == 200
    assert _data(r)["id"] == "Nok/Ploy"

    r = client.put("/api/employees/Nok/Ploy", json={"position": "Cashier"})
    assert _data(r)["position"] == "Cashier"

    assert client.delete("/api/employees/Nok/Ploy").status_code == 204
    assert client.get("/api/employees/Nok/Ploy").status_code == 404


# ---------- schedules ----------
def test_roster_upsert_scenario_partial_merge(client):
    first = {"year": 2024, "month": 5, "schedule": [["M", "E"]], "summary": [{"n": 1}]}
    r = client.post("/api/schedules", json=first)
    assert r.status_code == 201
    created = _data(r)
    assert created["summary"] == []

    second = {"year": 2024, "month": 5, "schedule": [["E", "OFF"]], "createdAt": "1999-01-01T00:00:00Z"}
    r = client.post("/api/schedules", json=second)
    assert r.status_code == 200

    doc = _data(client.get("/api/schedules/2024/5"))
    assert doc["schedule"] == [["E", "OFF"]]
    assert doc["createdAt"] == created["createdAt"]
    assert doc["id"] == created["id"]


def test_roster_full_replace_policy(make_app):
    client = make_app(ROSTER_MERGE_POLICY="full-replace").test_client()
    body = {"year": 2024, "month": 6, "schedule": [["M"]], "summary": [{"n": 1}]}
    a = _data(client.post("/api/schedules", json=body))
    b = _data(client.post("/api/schedules", json=body))
    assert a == b
    assert a["summary"] == [{"n": 1}]


def test_roster_errors(client):
    assert client.get("/api/schedules/2024/7").status_code == 404
    assert client.get("/api/schedules/2024/13").status_code == 400
    assert client.post("/api/schedules", json={"year": 2024, "schedule": []}).status_code == 400
    assert client.post("/api/schedules", json={"year": 2024, "month": 5}).status_code == 400


# ---------- shifts ----------
def test_shift_catalog_crud(client):
    late = _data(client.post("/api/shifts", json={"name": "Evening", "order": 2}))
    early = _data(client.post("/api/shifts", json={"name": "Morning", "order": 1, "description": "10-18"}))
    tie = _data(client.post("/api/shifts", json={"name": "Split", "order": 2, "active": False}))

    r = client.get("/api/shifts")
    assert [s["id"] for s in _data(r)] == [early["id"], late["id"], tie["id"]]

    r = client.put(f"/api/shifts/{late['id']}", json={"order": 0})
    assert _data(r)["order"] == 0
    assert _data(client.get("/api/shifts"))[0]["name"] == "Evening"

    assert client.delete(f"/api/shifts/{tie['id']}").status_code == 204
    assert client.get(f"/api/shifts/{tie['id']}").status_code == 404
    assert client.post("/api/shifts", json={"order": 1}).status_code == 400
    assert client.post("/api/shifts", json={"name": "X", "order": "first"}).status_code == 400


# ---------- sales ----------
def test_sales_range_query(client):
    for day, income in [("2024-05-01T09:00:00Z", 100), ("2024-05-31T21:00:00Z", 200), ("2024-06-01T01:00:00Z", 300)]:
        r = client.post("/api/sales", json={"date": day, "income": income, "staffOil": 2, "timeWork": "day"})
        assert r.status_code == 201

    r = client.get("/api/sales?startDate=2024-05-01&endDate=2024-05-31")
    assert r.status_code == 200
    assert [s["income"] for s in _data(r)] == [100, 200]

    assert len(_data(client.get("/api/sales"))) == 3


def test_sales_range_edges(client):
    client.post("/api/sales", json={"date": "2024-05-01T15:00:00Z", "income": 100})

    r = client.get("/api/sales?startDate=2024-05-01T10:00:00Z&endDate=2024-05-01")
    assert r.status_code == 200
    assert [s["income"] for s in _data(r)] == [100]

    r = client.get("/api/sales?startDate=2024-01-01&endDate=9999-12-31")
    assert r.status_code == 200
    assert len(_data(r)) == 1


def test_sales_invalid_date(client):
    r = client.get("/api/sales?startDate=not-a-date&endDate=2024-01-01")
    assert r.status_code == 400
    assert _error(r)["code"] == "INVALID_ARGUMENT"
    assert client.post("/api/sales", json={"income": 1}).status_code == 400

    r = client.post("/api/sales", json={"date": {"seconds": 10**15, "nanoseconds": 0}, "income": 1})
    assert r.status_code == 400
    assert _error(r)["code"] == "INVALID_ARGUMENT"


def test_sales_crud(client):
    sale = _data(client.post("/api/sales", json={"date": "2024-05-01", "income": 100, "cash": 100}))
    assert sale["date"] == "2024-05-01T00:00:00.000Z"

    r = client.put(f"/api/sales/{sale['id']}", json={"cash": 40, "creditCard": 60})
    assert r.status_code == 200
    assert _data(r)["cash"] == 40 and _data(r)["income"] == 100

    assert _data(client.get(f"/api/sales/{sale['id']}"))["creditCard"] == 60
    assert client.delete(f"/api/sales/{sale['id']}").status_code == 204
    assert client.get(f"/api/sales/{sale['id']}").status_code == 404
    assert client.put(f"/api/sales/{sale['id']}", json={"cash": 1}).status_code == 404


def test_sales_legacy_pair_input(make_app):
    client = make_app(SALES_DATE_REPRESENTATION="epoch").test_client()
    r = client.post("/api/sales", json={"date": {"_seconds": 1714521600, "_nanoseconds": 0}, "income": 5})
    assert r.status_code == 201
    assert _data(r)["date"] == "2024-05-01T00:00:00.000Z"
    assert len(_data(client.get("/api/sales?startDate=2024-05-01&endDate=2024-05-01"))) == 1


# ---------- holidays ----------
def test_holidays_listed_by_date(client, store):
    from massage_api.services.holiday_calendar import HolidayCalendar

    HolidayCalendar(store).import_holidays([
        {"date": "2024-12-31", "th": "วันสิ้นปี", "en": "New Year's Eve"},
        {"date": "2024-04-13", "th": "วันสงกรานต์", "en": "Songkran"},
    ])
    r = client.get("/api/holidays")
    assert [h["en"] for h in _data(r)] == ["Songkran", "New Year's Eve"]


# ---------- availability ----------
def test_store_down_returns_503_everywhere(client, store, monkeypatch):
    monkeypatch.setattr(store, "ping", lambda: False)
    for method, url in [("get", "/api/health"), ("get", "/api/employees"), ("post", "/api/schedules"),
                        ("get", "/api/sales"), ("delete", "/api/shifts/1")]:
        r = getattr(client, method)(url)
        assert r.status_code == 503
        assert r.headers["Retry-After"] == "5"
        assert _error(r)["code"] == "UNAVAILABLE"


def test_driver_disconnect_is_translated(store):
    store.ping_interval = 60
    with pytest.raises(Unavailable):
        with store._translate("find employees"):
            raise OperationalError("SELECT 1", {}, Exception("server closed the connection"))
    assert store.is_available() is False


def test_other_store_failures_are_internal(store):
    with pytest.raises(Internal) as exc:
        with store._translate("find employees"):
            raise SQLAlchemyError("statement compiled badly")
    assert exc.value.status_code == 500
    assert "find employees failed" in exc.value.message

    # the session was rolled back and the store still counts as reachable
    assert store.is_available() is True
    store.insert(Employee(name="Nok", position="Staff"))
    assert [e.name for e in store.find(Employee)] == ["Nok"]


class _ClosedSession:
    def execute(self, *args, **kwargs):
        raise InterfaceError("SELECT 1", {}, Exception("connection already closed"))

    def rollback(self):
        pass


class _ClosedDb:
    session = _ClosedSession()


def test_ping_treats_any_driver_error_as_down():
    store = StoreGateway(_ClosedDb(), ping_interval=0)
    assert store.ping() is False
    assert store.is_available() is False
    with pytest.raises(Unavailable):
        with store._translate("find employees"):
            store.session.execute("SELECT 1")


def test_gate_answers_503_on_interface_error(client, store, monkeypatch):
    monkeypatch.setattr(store, "db", _ClosedDb())
    r = client.get("/api/employees")
    assert r.status_code == 503
    assert _error(r)["code"] == "UNAVAILABLE"


def test_health(client):
    assert _data(client.get("/api/health")) == {"status": "ok"}


# ---------- configuration ----------
def test_missing_connection_string_is_fatal(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError):
        create_app()


def test_unknown_policy_is_fatal(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    with pytest.raises(ValueError):
        create_app(overrides={"ROSTER_MERGE_POLICY": "whatever"})
    with pytest.raises(ValueError):
        create_app(overrides={"SALES_DATE_REPRESENTATION": "string"})
