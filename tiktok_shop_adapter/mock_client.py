"""Mock TikTok Shop client for sandbox mode."""

from typing import Any, Dict, List, Optional, Tuple


class MockResponse:
    """Minimal response object compatible with dispatcher usage."""

    def __init__(self, data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None):
        self._data = data
        self.status_code = status_code
        self.headers = headers or {"content-type": "application/json"}
        self.reason_phrase = "OK" if status_code < 400 else "Error"

    def json(self) -> Any:
        return self._data


class MockTikTokShopClient:
    """
    Mock client that returns canned TikTok Shop envelopes.

    Every call is recorded in ``calls`` as ``(method, path, kwargs)`` so the
    signed parameters can be inspected.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._responses: Dict[str, Any] = {
            "/seller/202309/shops": {
                "code": 0,
                "message": "Success",
                "data": {
                    "shops": [
                        {
                            "id": "7000714532876273420",
                            "name": "Mock Shop",
                            "region": "GB",
                            "seller_type": "LOCAL",
                            "cipher": "GCP_XF90igAAAABh00qsWgtvOiGFNqyubMt3",
                            "code": "GBLCVUA1",
                        }
                    ]
                },
            },
            "/api/v2/token/get": {
                "code": 0,
                "message": "success",
                "data": {
                    "access_token": "ROW_mock_access_token",
                    "access_token_expire_in": 1700604800,
                    "refresh_token": "ROW_mock_refresh_token",
                    "refresh_token_expire_in": 1731536000,
                    "open_id": "mock_open_id",
                    "seller_name": "Mock Shop",
                },
            },
        }
        self._responses["/api/v2/token/refresh"] = self._responses["/api/v2/token/get"]
        if responses:
            self._responses.update(responses)

    async def request(self, method: str, path: str, **kwargs) -> MockResponse:
        self.calls.append((method, path, kwargs))
        data = self._responses.get(path, {"code": 0, "message": "Success", "data": {}})
        return MockResponse(data)

    async def aclose(self) -> None:
        return None
