import asyncio

import pytest

import proxyprobe.macros.ping as ping_module
import proxyprobe.probes as probes
from proxyprobe.errors import DialFailure, HandshakeIncomplete
from proxyprobe.macros import find_macro
from proxyprobe.macros.ping import Ping, ping
from proxyprobe.models import MacroType, PingResult, ProbeConfig


class ScriptedProbe:
    """Stands in for perform_probe, replaying one outcome per attempt."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.urls = []

    async def __call__(self, vendor, url, ssl_context=None, payload_template=None):
        self.urls.append(url)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if outcome == "hang":
            await asyncio.sleep(10)
        return outcome


@pytest.fixture
def scripted(monkeypatch):
    def install(outcomes):
        probe = ScriptedProbe(outcomes)
        monkeypatch.setattr(ping_module, "perform_probe", probe)
        return probe

    return install


def test_failed_attempts_are_counted_not_raised(scripted):
    probe = scripted([
        (10, 20, 200),
        DialFailure("http://t/", ConnectionRefusedError()),
        (30, 40, 204),
    ])

    result = asyncio.run(ping(object(), "http://t/", attempts=3, timeout_ms=1000))

    assert len(probe.urls) == 3
    assert result.packet_loss == pytest.approx(100 / 3)
    assert result.rtt_list == [10, 30]
    assert result.request_list == [20, 40]
    assert result.status_codes == [200, 204]
    assert result.rtt == 20
    assert result.rtt_sd == 14
    assert result.max_rtt == 30
    assert result.request == 30
    assert result.max_request == 40


def test_attempt_timeout_counts_as_loss(scripted):
    scripted(["hang", (5, 6, 200)])

    result = asyncio.run(ping(object(), "http://t/", attempts=2, timeout_ms=20))

    assert result.packet_loss == 50.0
    assert result.rtt_list == [5]
    assert result.rtt_sd == 0


def test_unexpected_errors_are_counted(scripted):
    scripted([ValueError("bad url"), HandshakeIncomplete("TLSv1.2")])

    result = asyncio.run(ping(object(), "https://t/", attempts=2, timeout_ms=1000))

    assert result == PingResult.failed()


def test_missing_vendor_skips_all_attempts(scripted):
    probe = scripted([(1, 2, 200)])

    result = asyncio.run(ping(None, "http://t/", attempts=5, timeout_ms=1000))

    assert probe.urls == []
    assert result.packet_loss == 100.0
    assert result.rtt == 0
    assert result.rtt_list == []


def test_zero_attempts_is_total_loss(scripted):
    probe = scripted([])

    result = asyncio.run(ping(object(), "http://t/", attempts=0, timeout_ms=1000))

    assert probe.urls == []
    assert result.packet_loss == 100.0


def test_unreachable_target_end_to_end(refusing_vendor):
    result = asyncio.run(ping(refusing_vendor, "http://127.0.0.1:9/", attempts=5, timeout_ms=1000))

    assert refusing_vendor.dials == 5
    assert result.packet_loss == 100.0
    assert result.rtt == 0
    assert result.request == 0
    assert result.rtt_list == []
    assert result.request_list == []
    assert result.status_codes == []


@pytest.mark.parametrize("url,expected", [
    ("https://example.com/", "trace"),
    ("http://example.com/", "netcat"),
    ("tcp://example.com:80/", "netcat"),
])
def test_probe_selected_by_scheme(monkeypatch, url, expected):
    calls = []

    async def fake_trace(vendor, url, ssl_context=None):
        calls.append("trace")
        return 1, 2, 200

    async def fake_netcat(vendor, url, template=None):
        calls.append("netcat")
        return 1, 2, 200

    monkeypatch.setattr(probes, "ping_via_trace", fake_trace)
    monkeypatch.setattr(probes, "ping_via_netcat", fake_netcat)

    assert asyncio.run(probes.perform_probe(object(), url)) == (1, 2, 200)
    assert calls == [expected]


def test_ping_macro_runs_configured_address(scripted):
    probe = scripted([(3, 4, 200), (5, 6, 200)])
    macro = find_macro(MacroType.PING)
    config = ProbeConfig(ping_address="http://t/x", ping_average_over=2, timeout_ms=1000)

    result = asyncio.run(macro.run(object(), config))

    assert isinstance(macro, Ping)
    assert macro.type is MacroType.PING
    assert macro.result is result
    assert probe.urls == ["http://t/x", "http://t/x"]
    assert result.rtt == 4


def test_unknown_macro_has_no_engine():
    assert find_macro(MacroType.SPEED) is None
