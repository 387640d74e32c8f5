import pytest

from machine_router.auth.identity import StaticTokenIdentityProviderClient
from machine_router.errors import UnauthorizedError
from machine_router.machines.handler import ApiHandler
from machine_router.machines.models import HttpResponseCode, MachineStatus, RequestModel

TOKEN = "good-token"


@pytest.fixture
def handler(engine):
    return ApiHandler(engine, StaticTokenIdentityProviderClient([TOKEN]))


def _request(method, path, token=TOKEN, **body):
    return RequestModel(method=method, path=path, token=token, **body)


def test_invalid_token_is_unauthorized_before_any_operation(handler, table):
    result = handler.handle(_request("POST", "/machine/request", token="bad",
                                     location_id="L1", job_id="j1"))

    assert result.status_code == HttpResponseCode.UNAUTHORIZED
    assert result.machine is None
    assert result.message == "Invalid token"
    assert table.list_calls == 0
    assert table.get_machine("m1").status == MachineStatus.AVAILABLE


def test_missing_token_is_unauthorized(handler, table):
    result = handler.handle(_request("GET", "/machine/m1", token=""))

    assert result.status_code == HttpResponseCode.UNAUTHORIZED
    assert table.get_calls == 0


def test_check_token_raises_typed_error(handler):
    with pytest.raises(UnauthorizedError) as exc_info:
        handler.check_token("nope")
    assert exc_info.value.status_code == HttpResponseCode.UNAUTHORIZED
    assert exc_info.value.message == "Invalid token"


def test_post_request_reserves(handler):
    result = handler.handle(_request("POST", "/machine/request", location_id="L1", job_id="j1"))

    assert result.status_code == HttpResponseCode.OK
    assert result.machine.machine_id == "m1"
    assert result.machine.current_job_id == "j1"


def test_post_request_without_job_is_bad_request(handler, table):
    result = handler.handle(_request("POST", "/machine/request", location_id="L1"))

    assert result.status_code == HttpResponseCode.BAD_REQUEST
    assert table.list_calls == 0


def test_get_machine_route(handler):
    result = handler.handle(_request("GET", "/machine/m3"))

    assert result.status_code == HttpResponseCode.OK
    assert result.machine.status == MachineStatus.RUNNING


def test_start_machine_route(handler):
    result = handler.handle(_request("POST", "/machine/m4/start"))

    assert result.status_code == HttpResponseCode.OK
    assert result.machine.status == MachineStatus.RUNNING


def test_method_is_case_insensitive(handler):
    result = handler.handle(_request("get", "/machine/m1"))
    assert result.status_code == HttpResponseCode.OK


@pytest.mark.parametrize("method,path", [
    ("GET", "/machine/request/extra"),
    ("DELETE", "/machine/m1"),
    ("GET", "/machine/m1/start"),
    ("POST", "/machine/m1"),
    ("GET", "/machine/m_1"),
    ("GET", "/machine/"),
    ("GET", "/machines"),
    ("GET", "/machine/m1\n"),
    ("POST", "/machine/m1/start\n"),
])
def test_unmatched_routes_fall_back_to_internal_error(handler, table, method, path):
    result = handler.handle(_request(method, path))

    assert result.status_code == HttpResponseCode.INTERNAL_SERVER_ERROR
    assert result.machine is None
    assert table.get_calls == 0


def test_hyphenated_machine_ids_are_routed(handler, engine, table):
    result = handler.handle(_request("GET", "/machine/washer-07"))
    assert result.status_code == HttpResponseCode.NOT_FOUND
    assert table.get_calls == 1
