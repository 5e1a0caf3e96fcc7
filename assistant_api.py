# assistant_api.py
"""
Client for the assistants REST resource.

Responsibilities:
- Issue create / read / update / delete requests
- Validate required fields before anything goes over the wire
- Normalize transport and application failures into AssistantError

No caching happens here; the list view-model owns the in-memory collection.
"""

from typing import Any, Dict, List, Optional

import httpx

from errors import AssistantError, ErrorKind, kind_for_status
from models import Assistant

import logging
logger = logging.getLogger(__name__)

BASE_PATH = '/api/assistants'


class AssistantApi:
    def __init__(
        self,
        base_url: str = 'http://localhost',
        *,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                'accept': 'application/json',
                'Content-Type': 'application/json',
                **(headers or {}),
            },
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> 'AssistantApi':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------------------------------------------------
    # Transport helpers
    # -------------------------------------------------------------------

    async def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> httpx.Response:
        if self._client.is_closed:
            logger.warning(f"{method} {path} skipped: client is closed")
            raise AssistantError(ErrorKind.REQUEST_FAILED, 'Request failed: client is closed', status=0)
        try:
            return await self._client.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise AssistantError(ErrorKind.REQUEST_FAILED, f'Request failed: {e}', status=0) from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, fallback: str = 'Request failed') -> None:
        if response.is_success:
            return

        message = f'{fallback} with status {response.status_code}'
        try:
            error_data = response.json()
        except ValueError:
            error_data = None
        if isinstance(error_data, dict) and error_data.get('error'):
            message = str(error_data['error'])

        logger.warning(f"HTTP {response.status_code}: {message}")
        raise AssistantError(kind_for_status(response.status_code), message, status=response.status_code)

    @staticmethod
    def _parse(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise AssistantError(
                ErrorKind.REQUEST_FAILED,
                'Response body is not valid JSON',
                status=0,
            ) from e

    def _assistant(self, response: httpx.Response) -> Assistant:
        self._raise_for_status(response)
        try:
            return Assistant.from_dict(self._parse(response))
        except (KeyError, TypeError) as e:
            raise AssistantError(ErrorKind.REQUEST_FAILED, f'Malformed assistant in response: {e}', status=0) from e

    @staticmethod
    def _require(**fields: Optional[str]) -> None:
        for field, value in fields.items():
            if value is not None and not value.strip():
                raise AssistantError(ErrorKind.VALIDATION_FAILED, f'{field.capitalize()} is required')

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------

    async def list_assistants(self) -> List[Assistant]:
        """
        Fetch all assistants for the current user, in backend order.
        """
        response = await self._request('GET', BASE_PATH)
        self._raise_for_status(response)
        data = self._parse(response)
        try:
            return [Assistant.from_dict(item) for item in data]
        except (KeyError, TypeError) as e:
            raise AssistantError(ErrorKind.REQUEST_FAILED, f'Malformed assistant in response: {e}', status=0) from e

    async def get_assistant(self, assistant_id: str) -> Assistant:
        response = await self._request('GET', f'{BASE_PATH}/{assistant_id}')
        return self._assistant(response)

    async def create_assistant(
        self,
        name: str,
        instructions: str,
        persona: Optional[str] = None,
    ) -> Assistant:
        """
        Create a new assistant. An empty persona is sent as absent.
        """
        self._require(name=name or '', instructions=instructions or '')

        body: Dict[str, Any] = {'name': name, 'instructions': instructions}
        if persona:
            body['persona'] = persona

        response = await self._request('POST', BASE_PATH, body)
        return self._assistant(response)

    async def update_assistant(
        self,
        assistant_id: str,
        *,
        name: Optional[str] = None,
        instructions: Optional[str] = None,
        persona: Optional[str] = None,
    ) -> Assistant:
        """
        Partial update; fields left as None are not sent.
        """
        self._require(name=name, instructions=instructions)

        body = {
            key: value
            for key, value in (('name', name), ('instructions', instructions), ('persona', persona))
            if value is not None
        }

        response = await self._request('PUT', f'{BASE_PATH}/{assistant_id}', body)
        return self._assistant(response)

    async def delete_assistant(self, assistant_id: str) -> None:
        """
        Delete an assistant. A 404 surfaces as NOT_FOUND; callers decide
        whether that means "already deleted".
        """
        response = await self._request('DELETE', f'{BASE_PATH}/{assistant_id}')
        self._raise_for_status(response, fallback='Delete failed')
