import pytest
import json
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from app import exceptions


@pytest.mark.asyncio
async def test_api_exception_handler():
    exc = exceptions.ValidationError("Image file is required")
    request = Request(scope={"type": "http"})
    response: JSONResponse = await exceptions.api_exception_handler(request, exc)

    assert response.status_code == 400
    # JSONResponse body is bytes, need to decode and parse
    body = json.loads(response.body.decode())
    assert body == {"error": "Image file is required"}


@pytest.mark.asyncio
async def test_api_exception_handler_server_error():
    exc = exceptions.UploadError("Failed to upload image: boom")
    request = Request(scope={"type": "http"})
    response: JSONResponse = await exceptions.api_exception_handler(request, exc)

    assert response.status_code == 500
    assert json.loads(response.body.decode()) == {"error": "Failed to upload image: boom"}


@pytest.mark.asyncio
async def test_http_exception_handler():
    exc = HTTPException(status_code=403, detail="Forbidden")
    request = Request(scope={"type": "http"})
    response: JSONResponse = await exceptions.http_exception_handler(request, exc)

    assert response.status_code == 403
    body = json.loads(response.body.decode())
    assert body == {"error": "Forbidden"}


@pytest.mark.asyncio
async def test_request_validation_handler():
    exc = RequestValidationError([{"loc": ("body", "title"), "msg": "Field required", "type": "missing"}])
    request = Request(scope={"type": "http"})
    response: JSONResponse = await exceptions.request_validation_handler(request, exc)

    assert response.status_code == 400
    assert json.loads(response.body.decode()) == {"error": "Field required"}


@pytest.mark.asyncio
async def test_generic_exception_handler():
    exc = ValueError("Something went wrong")
    request = Request(scope={"type": "http"})
    response: JSONResponse = await exceptions.generic_exception_handler(request, exc)

    assert response.status_code == 500
    body = json.loads(response.body.decode())
    assert body == {"error": "An unexpected error occurred."}


@pytest.mark.parametrize("exc_type,status", [
    (exceptions.ValidationError, 400),
    (exceptions.FileTooLargeError, 413),
    (exceptions.UploadError, 500),
    (exceptions.PersistenceError, 500),
    (exceptions.ConnectivityError, 503),
    (exceptions.APIException, 500),
    (KeyError, 500),
])
def test_status_table(exc_type, status):
    assert exceptions.status_for(exc_type) == status


def test_custom_exceptions_inherit_api_exception():
    exc = exceptions.FileTooLargeError()
    assert isinstance(exc, exceptions.ValidationError)
    assert isinstance(exc, exceptions.APIException)
    assert exc.status_code == 413
    assert "File too large" in str(exc)
