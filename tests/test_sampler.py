import pytest

from cray.records import NetworkStats, Process
from cray.sampler import Sampler


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def proc(pid, utime=0, stime=0, read=0, write=0, rss=0):
    return Process(pid=pid, utime=utime, stime=stime, read_bytes=read, write_bytes=write, memory_rss=rss)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sampler(clock):
    return Sampler(clock)


def test_first_sample_has_no_rates(sampler):
    first = proc(1, utime=100, read=500)
    sampler.calculate_process_rates("c1", [first], 0.0, 0)
    assert first.cpu_percent == 0.0
    assert first.read_bytes_per_sec == 0.0


def test_cpu_percent_single_core(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, utime=100, stime=10)], 0.0, 0)
    clock.advance(1.0)
    current = proc(1, utime=130, stime=30)
    sampler.calculate_process_rates("c1", [current], 0.0, 0)
    # Over one second, ticks per second equal percent of one core.
    assert current.cpu_percent == pytest.approx((130 + 30) - (100 + 10))


def test_cpu_percent_normalised_to_limit(clock):
    cores = 0.5
    unlimited = Sampler(clock)
    limited = Sampler(clock)
    unlimited.calculate_process_rates("c1", [proc(1, utime=0)], 0.0, 0)
    limited.calculate_process_rates("c1", [proc(1, utime=0)], cores, 0)
    clock.advance(2.0)
    a = proc(1, utime=20)
    b = proc(1, utime=20)
    unlimited.calculate_process_rates("c1", [a], 0.0, 0)
    limited.calculate_process_rates("c1", [b], cores, 0)
    assert b.cpu_percent == pytest.approx(a.cpu_percent / cores)


def test_cpu_percent_clamped_on_counter_reset(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, utime=500)], 0.0, 0)
    clock.advance(1.0)
    current = proc(1, utime=10)
    sampler.calculate_process_rates("c1", [current], 0.0, 0)
    assert current.cpu_percent == 100.0


def test_cpu_percent_clamp_with_fractional_limit(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, utime=0)], 0.5, 0)
    clock.advance(1.0)
    current = proc(1, utime=10_000)
    sampler.calculate_process_rates("c1", [current], 0.5, 0)
    assert current.cpu_percent == 100.0


def test_short_interval_yields_no_rate(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, utime=0, read=0)], 0.0, 0)
    clock.advance(0.05)
    current = proc(1, utime=50, read=1000)
    sampler.calculate_process_rates("c1", [current], 0.0, 0)
    assert current.cpu_percent == 0.0
    assert current.read_bytes_per_sec == 0.0


def test_io_rates(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, read=1000, write=4000)], 0.0, 0)
    interval = 2.0
    clock.advance(interval)
    current = proc(1, read=3000, write=4000)
    sampler.calculate_process_rates("c1", [current], 0.0, 0)
    assert current.read_bytes_per_sec * interval == pytest.approx(3000 - 1000)
    assert current.write_bytes_per_sec == 0.0


def test_io_counter_going_backwards_is_ignored(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, read=1000, write=100)], 0.0, 0)
    clock.advance(1.0)
    current = proc(1, read=500, write=300)
    sampler.calculate_process_rates("c1", [current], 0.0, 0)
    assert current.read_bytes_per_sec == 0.0
    assert current.write_bytes_per_sec == pytest.approx(300 - 100)


def test_memory_percent(sampler):
    full = proc(1, rss=4096)
    sampler.calculate_process_rates("c1", [full], 0.0, 4096)
    assert full.memory_percent == 100.0


def test_memory_percent_without_limit(sampler):
    current = proc(1, rss=4096)
    sampler.calculate_process_rates("c1", [current], 0.0, 0)
    assert current.memory_percent == 0.0


def test_container_switch_discards_samples(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, utime=0)], 0.0, 0)
    clock.advance(1.0)
    other = proc(1, utime=50)
    sampler.calculate_process_rates("c2", [other], 0.0, 0)
    assert other.cpu_percent == 0.0


def test_disappeared_pids_are_pruned(sampler, clock):
    sampler.calculate_process_rates("c1", [proc(1, utime=0), proc(2, utime=0)], 0.0, 0)
    clock.advance(1.0)
    sampler.calculate_process_rates("c1", [proc(1, utime=10)], 0.0, 0)
    clock.advance(1.0)
    one = proc(1, utime=30)
    two = proc(2, utime=40)
    sampler.calculate_process_rates("c1", [one, two], 0.0, 0)
    assert two.cpu_percent == 0.0
    assert one.cpu_percent == pytest.approx(30 - 10)


def test_network_rates(sampler, clock):
    sampler.calculate_network_rates([NetworkStats("eth0", rx_bytes=1000, tx_bytes=500)])
    interval = 4.0
    clock.advance(interval)
    current = NetworkStats("eth0", rx_bytes=9000, tx_bytes=100)
    sampler.calculate_network_rates([current])
    assert current.rx_bytes_per_sec * interval == pytest.approx(9000 - 1000)
    assert current.tx_bytes_per_sec == 0.0


def test_network_first_sample_and_pruning(sampler, clock):
    first = NetworkStats("eth0", rx_bytes=10)
    sampler.calculate_network_rates([first, NetworkStats("eth1", rx_bytes=10)])
    assert first.rx_bytes_per_sec == 0.0
    clock.advance(1.0)
    sampler.calculate_network_rates([NetworkStats("eth0", rx_bytes=20)])
    clock.advance(1.0)
    returned = NetworkStats("eth1", rx_bytes=50)
    sampler.calculate_network_rates([returned])
    assert returned.rx_bytes_per_sec == 0.0