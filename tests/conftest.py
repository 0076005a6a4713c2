import copy
import json

import pytest
import requests

from togglcopy import toggl


class FakeResponse:
    def __init__(self, status_code=200, body='[]'):
        self.status_code = status_code
        self.text = body if isinstance(body, str) else json.dumps(body)
        self.closed = False

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return json.loads(self.text)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


class FakeSession:
    """Stands in for requests.Session and records every request made through it.

    `routes` maps an HTTP method to a list of responses (or exceptions) handed
    out in order. The last one is reused once the list runs out.
    """

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []
        self.responses = []
        self.auth = None
        self.headers = {}
        self.closed = False

    def request(self, method, url, params=None, json=None):
        self.calls.append({'method': method, 'url': url, 'params': params, 'json': copy.deepcopy(json)})
        queue = self.routes.get(method, [FakeResponse()])
        res = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(res, Exception):
            raise res
        self.responses.append(res)
        return res

    def close(self):
        self.closed = True

    def requests_for(self, method):
        return [c for c in self.calls if c['method'] == method]


@pytest.fixture
def session(monkeypatch):
    sess = FakeSession()
    monkeypatch.setattr(toggl.req, 'Session', lambda: sess)
    return sess


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError('connection refused')
