import pytest

from proxyprobe.models import PingResult
from proxyprobe.stats import aggregate_ping, mean_ms, stdev_ms, update_maxima


def test_mean_truncates():
    assert mean_ms([10, 11]) == 10
    assert mean_ms([]) == 0


def test_stdev_uses_sample_denominator():
    assert stdev_ms([10, 20, 30]) == 10
    assert stdev_ms([2, 4, 4, 4, 5, 5, 7, 9]) == 2


@pytest.mark.parametrize("values", [[], [42]])
def test_stdev_needs_two_samples(values):
    assert stdev_ms(values) == 0


def test_aggregate_ping():
    result = PingResult()
    for rtt, req in ((10, 100), (30, 120)):
        update_maxima(result, rtt, req)

    aggregate_ping(result, [10, 30], [100, 120], [200, 204], failed=2, total=4)

    assert result.packet_loss == 50.0
    assert result.rtt == 20
    assert result.rtt_sd == 14
    assert result.jitter == result.rtt_sd
    assert result.max_rtt == 30
    assert result.request == 110
    assert result.request_sd == 14
    assert result.max_request == 120
    assert result.rtt_list == [10, 30]
    assert result.request_list == [100, 120]
    assert result.status_codes == [200, 204]


def test_aggregate_single_sample_has_no_jitter():
    result = PingResult()
    aggregate_ping(result, [15], [40], [200], failed=0, total=1)

    assert result.rtt == 15
    assert result.rtt_sd == 0
    assert result.request_sd == 0
    assert result.packet_loss == 0.0


def test_aggregate_without_successes_resets_everything():
    result = PingResult(rtt=5, max_rtt=9, request=3, rtt_list=[5], status_codes=[200])
    aggregate_ping(result, [], [], [], failed=3, total=3)

    assert result == PingResult(packet_loss=100.0)
    assert result.rtt_list == []
