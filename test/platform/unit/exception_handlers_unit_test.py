"""
Unit tests for the HTTP exception handlers

Domain errors keep their status code, ValueError and request validation map to 400,
anything else becomes a generic 503.
"""

from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel
import pytest

from src.platform.exception.exception_handlers import (
    TRANSIENT_ERROR_MESSAGE,
    register_exception_handlers,
)
from src.platform.exception.exceptions import ConflictError, NotFoundError, UnprocessableError


class _Payload(BaseModel):
    quantity: int


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/not-found')
    async def not_found() -> None:
        raise NotFoundError('Hold not found')

    @app.get('/conflict')
    async def conflict() -> None:
        raise ConflictError('Inventory already exists')

    @app.get('/unprocessable')
    async def unprocessable() -> None:
        raise UnprocessableError('Schedule is retired')

    @app.get('/value-error')
    async def value_error() -> None:
        raise ValueError('bad unit id')

    @app.get('/boom')
    async def boom() -> None:
        raise ConnectionError('database connection lost')

    @app.post('/payload')
    async def payload(body: _Payload) -> dict[str, int]:
        return {'quantity': body.quantity}

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.unit
class TestExceptionHandlers:
    @pytest.mark.parametrize(
        'path,status_code,detail',
        [
            ('/not-found', 404, 'Hold not found'),
            ('/conflict', 409, 'Inventory already exists'),
            ('/unprocessable', 422, 'Schedule is retired'),
            ('/value-error', 400, 'bad unit id'),
        ],
    )
    def test_known_errors(self, client: TestClient, path: str, status_code: int, detail: str):
        response = client.get(path)

        assert response.status_code == status_code
        assert response.json() == {'detail': detail}

    def test_validation_error_is_400(self, client: TestClient):
        response = client.post('/payload', json={'quantity': 'two'})

        assert response.status_code == 400
        assert response.json()['detail'][0]['loc'] == ['body', 'quantity']

    def test_infrastructure_error_hides_details(self, client: TestClient):
        response = client.get('/boom')

        assert response.status_code == 503
        assert response.json() == {'detail': TRANSIENT_ERROR_MESSAGE}
