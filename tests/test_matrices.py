import pytest

from proxyprobe.matrices import find, find_batch, find_batch_from_entry, get_matrix_map, list_matrices
from proxyprobe.matrices.httpping import HTTPPing
from proxyprobe.matrices.invalid import Invalid
from proxyprobe.matrices.packetloss import PacketLoss
from proxyprobe.matrices.rttping import RTTPing
from proxyprobe.models import MacroType, MatrixEntry, MetricType, PingResult

PING = PingResult(rtt=42, request=120, packet_loss=25.0, rtt_list=[40, 44], request_list=[110, 130])


@pytest.mark.parametrize("metric,cls,value", [
    (MetricType.PACKET_LOSS, PacketLoss, 25.0),
    (MetricType.RTT_PING, RTTPing, 42),
    (MetricType.HTTP_PING, HTTPPing, 120),
])
def test_ping_matrices_extract_their_field(metric, cls, value):
    matrix = find(metric)

    assert isinstance(matrix, cls)
    assert matrix.type is metric
    assert matrix.macro_job is MacroType.PING

    matrix.extract(MatrixEntry(metric), PING)
    assert matrix.value == value


def test_mismatched_result_leaves_default():
    matrix = find(MetricType.PACKET_LOSS)

    matrix.extract(MatrixEntry(MetricType.PACKET_LOSS), {"packet_loss": 99.0})
    matrix.extract(MatrixEntry(MetricType.PACKET_LOSS), None)

    assert matrix.value == 0.0


@pytest.mark.parametrize("metric", [MetricType.AVERAGE_SPEED, MetricType.SCRIPT_TEST, MetricType.INVALID, "nope"])
def test_unregistered_type_resolves_to_invalid(metric):
    matrix = find(metric)

    assert isinstance(matrix, Invalid)
    assert matrix.type is MetricType.INVALID
    assert matrix.macro_job is MacroType.INVALID

    matrix.extract(MatrixEntry(MetricType.INVALID), PING)
    assert matrix.value is None


def test_find_batch_keeps_order_and_unknowns():
    matrices = find_batch([MetricType.PACKET_LOSS, MetricType.RTT_PING, MetricType.INBOUND_GEOIP])

    assert [type(m) for m in matrices] == [PacketLoss, RTTPing, Invalid]


def test_find_batch_returns_fresh_instances_for_duplicates():
    first, second = find_batch([MetricType.RTT_PING, MetricType.RTT_PING])

    assert first is not second
    first.extract(MatrixEntry(MetricType.RTT_PING), PING)
    assert second.value == 0


def test_find_batch_from_entry():
    entries = [MatrixEntry(MetricType.HTTP_PING, {"attempts": 3}), MatrixEntry(MetricType.UDP_TYPE)]

    assert [m.type for m in find_batch_from_entry(entries)] == [MetricType.HTTP_PING, MetricType.INVALID]


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        get_matrix_map()[MetricType.UDP_TYPE] = Invalid


def test_list_matrices():
    assert list_matrices() == ["TEST_PING_CONN", "TEST_PING_PACKET_LOSS", "TEST_PING_RTT"]


def test_as_dict():
    matrix = find(MetricType.RTT_PING)
    matrix.extract(MatrixEntry(MetricType.RTT_PING), PING)

    assert matrix.as_dict() == {"type": "TEST_PING_RTT", "value": 42}


@pytest.mark.parametrize("text,metric", [
    ("TEST_PING_RTT", MetricType.RTT_PING),
    ("packet_loss", MetricType.PACKET_LOSS),
    (" test_ping_conn ", MetricType.HTTP_PING),
    ("whatever", MetricType.INVALID),
])
def test_metric_type_parse(text, metric):
    assert MetricType.parse(text) is metric
