from datetime import datetime, timedelta, timezone

import pytest

from greencart.errors import MissingInputError, PersistenceError, UnexpectedSimulationError
from greencart.models.domain import Route, SimulationResult, TrafficLevel
from greencart.persistence.base import OrderRepository
from greencart.persistence.memory import (
    InMemoryOrderRepository,
    InMemoryRouteRepository,
    InMemorySimulationResultRepository,
    StoredOrder,
)
from greencart.schemas.simulation import SimulationRequest
from greencart.services.simulation import get_history, run_simulation


def _request(**overrides) -> SimulationRequest:
    payload = {"numberOfDrivers": 2, "routeStartTime": "09:00", "maxHoursPerDay": 10}
    payload.update(overrides)
    return SimulationRequest.model_validate(payload)


@pytest.fixture
def orders() -> InMemoryOrderRepository:
    routes = InMemoryRouteRepository(
        [
            Route(route_id="1", distance_km=10, traffic_level=TrafficLevel.LOW, base_time_min=30),
            Route(route_id="2", distance_km=20, traffic_level=TrafficLevel.HIGH, base_time_min=60),
            Route(route_id="3", distance_km=5, traffic_level=TrafficLevel.MEDIUM, base_time_min=20),
        ]
    )
    return InMemoryOrderRepository(
        routes,
        [
            StoredOrder(order_id="o1", value_rs=500, route_ref="1", actual_delivery_duration_min=25),
            StoredOrder(order_id="o2", value_rs=1500, route_ref="2", actual_delivery_duration_min=95),
            StoredOrder(order_id="o3", value_rs=800, route_ref="3", actual_delivery_duration_min=15),
        ],
    )


class FailingResultRepository(InMemorySimulationResultRepository):
    def save(self, result: SimulationResult) -> SimulationResult:
        raise ConnectionError("database unavailable")


class ExplodingOrderRepository(OrderRepository):
    def __init__(self) -> None:
        self.calls = 0

    def find_all(self):
        self.calls += 1
        raise RuntimeError("orders table missing")


def test_run_simulation_persists_result(orders):
    results = InMemorySimulationResultRepository()

    run = run_simulation(_request(), orders, results)

    assert run.result.id
    assert run.result.total_profit == pytest.approx(2535)
    assert run.result.number_of_drivers == 2
    assert run.result.route_start_time == "09:00"
    assert run.result.max_hours_per_day == 10
    assert run.result.timestamp.tzinfo is not None
    assert get_history(results) == [run.result]


def test_unresolved_route_reference_is_skipped(orders):
    orders.add(StoredOrder(order_id="o4", value_rs=700, route_ref="missing", actual_delivery_duration_min=5))
    orders.add(StoredOrder(order_id="o5", value_rs=700, route_ref=None, actual_delivery_duration_min=5))

    run = run_simulation(_request(), orders, InMemorySimulationResultRepository())

    assert run.summary.total_deliveries == 3
    assert run.summary.skipped_order_ids == ("o4", "o5")


def test_skipped_orders_are_logged_once(orders, caplog):
    orders.add(StoredOrder(order_id="o4", value_rs=700, route_ref="missing", actual_delivery_duration_min=5))

    with caplog.at_level("WARNING"):
        run_simulation(_request(), orders, InMemorySimulationResultRepository())

    warnings = [record for record in caplog.records if record.levelname == "WARNING"]
    assert len(warnings) == 1
    assert "o4" in warnings[0].getMessage()


def test_invalid_input_touches_no_store():
    order_repo = ExplodingOrderRepository()
    results = InMemorySimulationResultRepository()

    with pytest.raises(MissingInputError):
        run_simulation(_request(maxHoursPerDay=None), order_repo, results)

    assert order_repo.calls == 0
    assert results.list_all() == []


def test_persistence_failure_keeps_computed_kpis(orders):
    with pytest.raises(PersistenceError) as excinfo:
        run_simulation(_request(), orders, FailingResultRepository())

    summary = excinfo.value.summary
    assert summary is not None
    assert summary.total_profit == pytest.approx(2535)
    assert summary.on_time_deliveries == 2
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_order_loading_failure_is_unexpected_error():
    with pytest.raises(UnexpectedSimulationError):
        run_simulation(_request(), ExplodingOrderRepository(), InMemorySimulationResultRepository())


def test_history_is_newest_first():
    results = InMemorySimulationResultRepository()
    now = datetime.now(timezone.utc)

    def _result(minutes_ago: int) -> SimulationResult:
        return SimulationResult(
            number_of_drivers=1,
            route_start_time="08:00",
            max_hours_per_day=8,
            total_profit=minutes_ago,
            efficiency_score=100,
            on_time_deliveries=1,
            total_deliveries=1,
            total_fuel_cost=0,
            timestamp=now - timedelta(minutes=minutes_ago),
        )

    results.save(_result(10))
    results.save(_result(1))
    results.save(_result(5))

    assert [item.total_profit for item in get_history(results)] == [1, 5, 10]


def test_repeated_runs_give_identical_kpis(orders):
    results = InMemorySimulationResultRepository()

    first = run_simulation(_request(), orders, results)
    second = run_simulation(_request(), orders, results)

    assert first.summary.as_dict() == second.summary.as_dict()
    assert first.result.id != second.result.id
    assert len(results.list_all()) == 2
