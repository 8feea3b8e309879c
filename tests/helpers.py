import json
from types import SimpleNamespace

from yahoo_integration.storage import DocumentStore

TOKEN_RESPONSE = {
    'access_token': 'access-1',
    'refresh_token': 'refresh-1',
    'token_type': 'bearer',
    'expires_in': 3600,
    'xoauth_yahoo_guid': 'GUID123'
}

LEAGUE_KEY = '423.l.12345'

SETTINGS = {
    'draft_type': 'live',
    'scoring_type': 'head',
    'roster_positions': [{'roster_position': {'position': 'QB', 'count': 1}}]
}

SETTINGS_RESPONSE = {
    'fantasy_content': {
        'league': [
            {'league_key': LEAGUE_KEY, 'name': 'Test League'},
            {'settings': [SETTINGS]}
        ]
    }
}


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ''
        self.text = text

    def json(self):
        if self._json is None:
            return json.loads(self.text)
        return self._json


class FakeHttp:
    """Stands in for requests.Session, replaying queued responses in order"""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.headers = {}

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next('GET', url, kwargs)

    def post(self, url, **kwargs):
        return self._next('POST', url, kwargs)


class MemoryStore(DocumentStore):
    def __init__(self, document=None):
        self.document = document
        self.saves = 0

    def load(self):
        return self.document

    def save(self, document):
        self.document = json.loads(json.dumps(document))
        self.saves += 1


class FakeOAuth:
    """Records refresh calls and hands out numbered tokens"""

    def __init__(self, fail_with=None):
        self.refresh_calls = []
        self.fail_with = fail_with

    def refresh(self, token_set, client_id, client_secret, redirect_uri):
        from yahoo_integration.models import TokenSet

        self.refresh_calls.append(token_set)
        if self.fail_with:
            raise self.fail_with
        n = len(self.refresh_calls) + 1
        return TokenSet(access_token=f'access-{n}', refresh_token=f'refresh-{n}')


class FakeChatClient:
    """Mimics openai.OpenAI().chat.completions.create"""

    def __init__(self, content='  Strong WR1 target.  ', error=None, choices=None):
        self.requests = []
        self.error = error
        self._choices = choices
        self.content = content
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        if self._choices is not None:
            return SimpleNamespace(choices=self._choices)
        message = SimpleNamespace(role='assistant', content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])
