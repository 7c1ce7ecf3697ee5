import dataclasses
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from flowcontrol.config import (
    ListWorkEstimatorConfig,
    MutatingWorkEstimatorConfig,
    WorkEstimatorConfig,
    default_list_work_estimator_config,
    default_mutating_work_estimator_config,
    default_work_estimator_config,
)
from flowcontrol.duration import Duration


def test_default_config_matches_baseline_values():
    cfg = default_work_estimator_config()
    assert cfg.minimum_seats == 1
    assert cfg.maximum_seats == 10
    assert cfg.list_config.objects_per_seat == 100.0
    assert cfg.mutating_config.enabled is True
    assert cfg.mutating_config.event_additional_duration == Duration.from_milliseconds(5)
    assert cfg.mutating_config.watches_per_seat == 10.0


def test_default_config_is_fresh_but_equal():
    a = default_work_estimator_config()
    b = default_work_estimator_config()
    assert a == b
    assert a is not b


def test_default_seat_bounds_are_ordered():
    cfg = default_work_estimator_config()
    assert 1 <= cfg.minimum_seats <= cfg.maximum_seats


def test_event_additional_timedelta_is_five_milliseconds():
    mutating = default_mutating_work_estimator_config()
    assert mutating.event_additional_timedelta == timedelta(milliseconds=5)


def test_event_additional_timedelta_same_for_any_unit():
    mutating = MutatingWorkEstimatorConfig(event_additional_duration=Duration.of(5000, "us"))
    assert mutating.event_additional_timedelta == timedelta(milliseconds=5)


def test_list_default_matches_aggregate_default():
    standalone = default_list_work_estimator_config()
    assert standalone == default_work_estimator_config().list_config
    assert standalone.objects_per_seat == 100.0


def test_no_arg_construction_equals_defaults():
    assert WorkEstimatorConfig() == default_work_estimator_config()
    assert ListWorkEstimatorConfig() == default_list_work_estimator_config()
    assert MutatingWorkEstimatorConfig() == default_mutating_work_estimator_config()


def test_configs_are_immutable():
    cfg = default_work_estimator_config()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.maximum_seats = 20
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.mutating_config.enabled = False


def test_nested_configs_may_be_unset():
    cfg = WorkEstimatorConfig(list_config=None, mutating_config=None)
    assert cfg.list_config is None
    assert cfg.mutating_config is None
    assert cfg.minimum_seats == 1


def test_out_of_contract_values_are_not_rejected():
    cfg = WorkEstimatorConfig(
        list_config=ListWorkEstimatorConfig(objects_per_seat=0.0),
        mutating_config=MutatingWorkEstimatorConfig(watches_per_seat=-1.0),
        minimum_seats=20,
        maximum_seats=1,
    )
    assert cfg.minimum_seats > cfg.maximum_seats
    assert cfg.list_config.objects_per_seat == 0.0


def test_default_construction_from_many_threads():
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: default_work_estimator_config(), range(32)))
    assert all(r == results[0] for r in results)
