import pytest

from pstatebalance.params import ModelParameters, Policy, Thresholds


def test_default_levels_at_boundaries():
    t = Thresholds()
    assert t.level(0) == 1
    assert t.level(3) == 1
    assert t.level(4) == 2
    assert t.level(48) == 5
    assert t.level(49) == 6
    assert t.level(90) == 6


def test_levels_are_monotonic():
    t = Thresholds()
    levels = [t.level(n) for n in range(0, 91)]
    assert levels == sorted(levels)
    assert set(levels) == {1, 2, 3, 4, 5, 6}


def test_from_values_round_trip():
    t = Thresholds.from_values([1, 2, 5, 10, 20])
    assert t.values == (1, 2, 5, 10, 20)
    assert Thresholds.from_values(t.values) == t


def test_from_values_wrong_length():
    with pytest.raises(ValueError):
        Thresholds.from_values([1, 2, 3])


def test_unsorted_thresholds_rejected():
    with pytest.raises(ValueError):
        Thresholds.from_values([5, 3, 12, 24, 48])


def test_service_rates_from_defaults():
    p = ModelParameters()
    assert p.service_rate(1, 1) == 1.0
    assert p.service_rate(2, 6) == 2.6
    assert p.service_rate(1, 3) == p.service_rate(2, 3)


def test_service_rate_invalid_queue_and_level():
    p = ModelParameters()
    with pytest.raises(ValueError):
        p.service_rate(3, 1)
    with pytest.raises(ValueError):
        p.service_rate(1, 7)


def test_server_power_constants():
    p = ModelParameters()
    assert p.server_power(1, 1, 0) == 32.0
    assert p.server_power(1, 0, 1) == 8.0
    assert p.server_power(6, 1, 0) == 95.0


@pytest.mark.parametrize("level", range(1, 7))
def test_server_power_is_additive(level):
    p = ModelParameters()
    total = p.server_power(level, 4, 6)
    assert total == pytest.approx(p.server_power(level, 4, 0) + p.server_power(level, 0, 6))


@pytest.mark.parametrize("level", range(1, 7))
def test_idle_power_is_quarter_of_busy(level):
    p = ModelParameters()
    assert p.server_power(level, 0, 4) == pytest.approx(p.server_power(level, 1, 0))


def test_server_power_invalid_level():
    with pytest.raises(ValueError):
        ModelParameters().server_power(0, 1, 1)


def test_bad_parameter_tables_rejected():
    with pytest.raises(ValueError):
        ModelParameters(busy_power=(1.0, 2.0))
    with pytest.raises(ValueError):
        ModelParameters(servers=0)


def test_policy_members_distinct():
    assert Policy("mixed") is Policy.MIXED
    assert Policy("losses") is Policy.LOSSES