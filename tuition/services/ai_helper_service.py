from __future__ import annotations

import logging
from typing import Any

import httpx

from tuition.config import settings
from tuition.core.errors import AIHelperError
from tuition.core.results import OpResult, result_from_error
from tuition.services.view_state import HANDLED_ERRORS, require_text


logger = logging.getLogger(__name__)

EXAMPLE_QUESTIONS = [
    "What are effective ways to motivate students who don't complete homework?",
    "How should I communicate with parents about their child's progress?",
    'What teaching strategies work best for mixed-ability classrooms?',
    'How can I make math more engaging for students?',
]


def _error_text(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ('error', 'message', 'detail'):
            if data.get(key):
                return str(data[key])
    return response.text or f'AI helper returned HTTP {response.status_code}'


class AIHelperClient:
    """Single-attempt client for the external question-answering function."""

    def __init__(
        self,
        url: str | None = None,
        *,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = (settings.ai_helper_url if url is None else url).strip()
        self.api_key = settings.ai_helper_api_key if api_key is None else api_key
        self.timeout = settings.ai_helper_timeout_seconds if timeout is None else timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {'Authorization': f'Bearer {self.api_key}'}

    async def ask(self, question: str) -> str:
        text = require_text(question, 'Please enter a question')
        if not self.url:
            raise AIHelperError('AI helper endpoint is not configured')
        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers(), transport=self._transport) as client:
            try:
                response = await client.post(self.url, json={'question': text})
            except httpx.HTTPError as exc:
                raise AIHelperError(str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            raise AIHelperError(_error_text(response))
        try:
            data: Any = response.json()
        except ValueError as exc:
            raise AIHelperError('AI helper returned an invalid response') from exc
        answer = data.get('answer') if isinstance(data, dict) else None
        if not isinstance(answer, str) or not answer.strip():
            raise AIHelperError('AI helper returned no answer')
        return answer


class AIHelpView:
    def __init__(self, client: AIHelperClient) -> None:
        self.client = client
        self.loading = False
        self.answer = ''

    async def ask(self, question: str | None) -> OpResult:
        self.loading = True
        self.answer = ''
        try:
            self.answer = await self.client.ask(question or '')
            logger.info('ai_helper_answered question_chars=%s answer_chars=%s', len(question or ''), len(self.answer))
            return OpResult.success(data=self.answer)
        except HANDLED_ERRORS as exc:
            return result_from_error(exc, failure_message='Failed to get AI response', logger=logger, event='ai_helper_failed')
        finally:
            self.loading = False
