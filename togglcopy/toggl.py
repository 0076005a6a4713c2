from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, tzinfo
from typing import Any, ContextManager, Dict, Iterable, Iterator, List, Optional

import requests as req

from togglcopy.dates import day_window, format_timestamp, next_day, parse_timestamp
from togglcopy.errors import DecodeError, HTTPStatusError, TransportError
from togglcopy.model import IDENTITY_FIELDS, TimeEntry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.track.toggl.com/api/v8'
TIME_ENTRIES_PATH = 'time_entries'

# Toggl's basic auth convention: the token is the user name, this is the password.
TOKEN_PASSWORD = 'api_token'
CREATED_WITH = 'api'


@contextmanager
def client(token: str, base_url: str = DEFAULT_BASE_URL) -> ContextManager[_Client]:
    """Open an authenticated session to the Toggl API and return a client."""

    sess = req.Session()
    sess.auth = (token, TOKEN_PASSWORD)
    sess.headers.update({'Content-Type': 'application/json'})
    try:
        yield _Client(sess, base_url)
    finally:
        sess.close()


class _Client:
    _sess: req.Session
    _url: str

    def __init__(self, sess, base_url):
        self._sess = sess
        self._url = f'{base_url.rstrip("/")}/{TIME_ENTRIES_PATH}'

    def fetch_day_entries(self, day: datetime) -> List[TimeEntry]:
        """Fetch every time entry of `day`'s calendar date in `day`'s time zone.

        Args:
            day: an aware datetime. Only its date and zone matter.

        Returns:
            list: The entries as the API returned them.

        Raises:
            TransportError: the request failed or was answered with a non-2xx status.
            DecodeError: the body isn't a JSON array of objects.
        """

        window = day_window(day)
        params = {
            'start_date': format_timestamp(window.start, timespec='seconds'),
            'end_date': format_timestamp(window.end, timespec='seconds'),
        }

        with self._request('GET', params=params) as res:
            try:
                entries = res.json()
            except ValueError as e:
                raise DecodeError(f'Response from {self._url} is not valid JSON: {e}') from e
            except req.exceptions.RequestException as e:
                raise TransportError(f'Failed to read response from {self._url}: {e}') from e

        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise DecodeError(f'Expected a JSON array of objects from {self._url}')
        return entries

    def create_entry(self, entry: TimeEntry):
        entry['created_with'] = CREATED_WITH
        with self._request('POST', body={'time_entry': entry}):
            pass
        logger.debug('Created entry %s - %s', entry.get('start'), entry.get('stop'))

    def create_entries(self, entries: Iterable[TimeEntry]) -> int:
        """Create entries one by one, in order.

        The first failure stops the loop. Entries created before it stay created.

        Returns:
            int: Number of entries created.
        """

        created = 0
        for entry in entries:
            self.create_entry(entry)
            created += 1
        return created

    def _request(self, method: str, params: Optional[Dict[str, str]] = None,
                 body: Optional[Dict[str, Any]] = None) -> req.Response:
        logger.debug('%s %s params=%s', method, self._url, params)
        try:
            res = self._sess.request(method, self._url, params=params, json=body)
        except req.exceptions.RequestException as e:
            raise TransportError(f'{method} {self._url} failed: {e}') from e

        if not res.ok:
            res.close()
            raise HTTPStatusError(res.status_code, f'{method} {self._url}')
        return res


def sanitize(entries: List[TimeEntry]) -> List[TimeEntry]:
    """Drop the fields the server assigns (id, guid, uid, at) so the entries can be created again."""

    for entry in entries:
        for field in IDENTITY_FIELDS:
            entry.pop(field, None)
    return entries


def shift_entries(entries: Iterable[TimeEntry], zone: tzinfo) -> Iterator[TimeEntry]:
    """Move each entry's start and stop to the next calendar day in `zone`.

    Entries are shifted lazily, one at a time, so a bad timestamp only
    surfaces when its entry is reached.
    """

    for entry in entries:
        for field in ('start', 'stop'):
            t = parse_timestamp(entry.get(field))
            entry[field] = format_timestamp(next_day(t.astimezone(zone)).astimezone(t.tzinfo))
        yield entry
