"""
Tests for guest rate limiting
"""

from types import SimpleNamespace

from seatplan.utils.security import get_client_ip, rate_limit_check, rate_limiter

def test_sliding_window():
    rate_limiter.clear()
    
    assert rate_limit_check("1.2.3.4", limit=2, now=100.0)
    assert rate_limit_check("1.2.3.4", limit=2, now=110.0)
    assert not rate_limit_check("1.2.3.4", limit=2, now=120.0)
    # Other clients have their own budget
    assert rate_limit_check("5.6.7.8", limit=2, now=120.0)
    # The first request leaves the window after a minute
    assert rate_limit_check("1.2.3.4", limit=2, now=160.5)

def test_client_ip_prefers_proxy_headers():
    direct = SimpleNamespace(headers={}, client=SimpleNamespace(host="10.0.0.1"))
    forwarded = SimpleNamespace(headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}, client=None)
    real_ip = SimpleNamespace(headers={"X-Real-IP": "198.51.100.2"}, client=None)
    
    assert get_client_ip(direct) == "10.0.0.1"
    assert get_client_ip(forwarded) == "203.0.113.7"
    assert get_client_ip(real_ip) == "198.51.100.2"
