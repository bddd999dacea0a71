from __future__ import annotations

from utils.network import client_ip_from_headers


def test_forwarded_for_takes_first_address():
    headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.2", "X-Real-IP": "10.0.0.2"}

    assert client_ip_from_headers(headers) == "203.0.113.7"


def test_falls_back_to_proxy_headers():
    assert client_ip_from_headers({"X-Forwarded-For": " ", "CF-Connecting-IP": "198.51.100.4"}) == "198.51.100.4"


def test_no_headers():
    assert client_ip_from_headers(None) is None
    assert client_ip_from_headers({}) is None
