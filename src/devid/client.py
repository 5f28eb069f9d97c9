"""HTTP session that sends each request under an account's device fingerprint."""

from curl_cffi.requests import Session

BASE_HEADERS = {
    "accept": "application/json",
    "accept-language": "en-US,en;q=0.9",
}


def _merge(headers, extra):
    """Update ``headers`` in place, replacing names case-insensitively."""
    for name, value in extra.items():
        for existing in [k for k in headers if k.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value


class FingerprintClient:
    """Thin wrapper over a curl_cffi session.

    Headers are looked up from the manager on every request, so a regenerate
    or restore takes effect on the next call without rebuilding the client.
    """

    def __init__(self, manager, email, timeout=30, session=None):
        self.manager = manager
        self.email = email
        self.timeout = timeout
        self._session = session or Session(impersonate="chrome")

    def _build_headers(self, extra=None):
        headers = dict(BASE_HEADERS)
        _merge(headers, extra or {})
        # identity headers always come from the fingerprint
        _merge(headers, self.manager.get_headers(self.email))
        return headers

    def get(self, url, params=None, headers=None):
        resp = self._session.get(url, headers=self._build_headers(headers), params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    def post(self, url, data=None, json=None, headers=None):
        resp = self._session.post(
            url, headers=self._build_headers(headers), data=data, json=json, timeout=self.timeout
        )
        resp.raise_for_status()
        return resp

    def close(self):
        self._session.close()
