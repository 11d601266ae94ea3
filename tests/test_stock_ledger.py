from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException

from fabrication_service.app.crud.inventory import stock_ledger_crud as ledger
from fabrication_service.app.crud.production import orders_crud, work_orders_crud
from fabrication_service.app.models.inventory.stock_movements import StockMovement
from fabrication_service.app.models.inventory.stock_reservations import StockReservation
from fabrication_service.app.models.production.warranties import Warranty


@pytest.fixture
def reserved_work_order(db_session, make_stock_item, make_template, make_work_order):
    metalon = make_stock_item(quantity=45, reserved=10, min_level=20, reorder_point=30)
    make_template([(metalon, "perimeter * 1.2")])
    work_order = make_work_order(measurements={"width": 3, "height": 2})
    reservations = ledger.reserve_for_work_order(db_session, work_order, work_order.measurements, "user-1")
    db_session.commit()
    return metalon, work_order, reservations


def movements_of(db_session, item, movement_type):
    return db_session.query(StockMovement).filter(
        StockMovement.stock_item_id == item.id, StockMovement.type == movement_type
    ).all()


def test_reserve_holds_bom_quantity(db_session, reserved_work_order):
    metalon, work_order, reservations = reserved_work_order

    assert len(reservations) == 1
    assert reservations[0].status == "RESERVED"
    assert reservations[0].quantity_reserved == Decimal("12")
    db_session.refresh(metalon)
    assert metalon.quantity == Decimal("45")
    assert metalon.reserved == Decimal("22")
    assert len(movements_of(db_session, metalon, "RESERVE")) == 1


def test_reserve_without_measurements_or_template_is_a_no_op(db_session, make_stock_item, make_work_order):
    make_stock_item(quantity=45)
    no_measurements = make_work_order(measurements=None)
    assert ledger.reserve_for_work_order(db_session, no_measurements, None) == []

    no_template = make_work_order(service_type="TOLDO", measurements={"width": 2}, order_number=1001)
    assert ledger.reserve_for_work_order(db_session, no_template, no_template.measurements) == []


def test_reserve_skips_zero_quantities_and_unknown_items(db_session, make_stock_item, make_template, make_work_order):
    sheet = make_stock_item(name="Chapa Lambril 0.65", quantity=120, unit="m2")
    ghost = make_stock_item(name="Discontinued", quantity=0)
    make_template([(sheet, "area * 1.1"), (sheet, "fixed: 0"), (ghost, "fixed: 2")])
    ghost.is_deleted = True
    db_session.commit()

    work_order = make_work_order(measurements={"width": 3.5, "height": 2.4})
    reservations = ledger.reserve_for_work_order(db_session, work_order, work_order.measurements)

    assert [r.quantity_reserved for r in reservations] == [Decimal("9.24")]


def test_duplicate_bom_lines_are_reserved_separately(db_session, make_stock_item, make_template, make_work_order):
    disc = make_stock_item(name="Disco Corte 7\"", quantity=50, unit="un")
    make_template([(disc, "fixed: 4"), (disc, "fixed: 2")])
    work_order = make_work_order(measurements={"width": 1})

    reservations = ledger.reserve_for_work_order(db_session, work_order, work_order.measurements)
    db_session.commit()

    assert len(reservations) == 2
    db_session.refresh(disc)
    assert disc.reserved == Decimal("6")


def test_complete_consumes_reservations_and_issues_warranty(db_session, reserved_work_order, current_user):
    metalon, work_order, _ = reserved_work_order

    result = work_orders_crud.complete_work_order(db_session, work_order.id, current_user)

    db_session.refresh(metalon)
    assert metalon.quantity == Decimal("33")
    assert metalon.reserved == Decimal("10")
    assert result.reservations_consumed == 1

    reservation = db_session.query(StockReservation).filter_by(work_order_id=work_order.id).one()
    assert reservation.status == "CONSUMED"
    assert reservation.consumed_at is not None

    db_session.refresh(work_order)
    assert work_order.status == "FINISHED"
    assert work_order.finished_at is not None
    assert work_order.order.status == "CONCLUIDO"
    assert work_order.order.progress == 100

    warranty = db_session.query(Warranty).filter_by(order_id=work_order.order_id).one()
    assert warranty.end_date - warranty.start_date == timedelta(days=365)
    assert len(movements_of(db_session, metalon, "OUT")) == 1


def test_consume_twice_never_double_decrements(db_session, reserved_work_order):
    metalon, work_order, _ = reserved_work_order

    first = ledger.consume_work_order_reservations(db_session, work_order)
    db_session.commit()
    second = ledger.consume_work_order_reservations(db_session, work_order)
    db_session.commit()

    assert len(first) == 1
    assert second == []
    db_session.refresh(metalon)
    assert metalon.quantity == Decimal("33")
    assert metalon.reserved == Decimal("10")


def test_open_reservations_filter_on_reserved_status(db_session, reserved_work_order):
    _, work_order, reservations = reserved_work_order
    reservations[0].status = "CONSUMED"
    db_session.commit()

    assert ledger.get_open_reservations(db_session, work_order.id, work_order.org_id) == []


def test_completing_twice_is_rejected(db_session, reserved_work_order, current_user):
    metalon, work_order, _ = reserved_work_order
    work_orders_crud.complete_work_order(db_session, work_order.id, current_user)

    with pytest.raises(HTTPException) as exc:
        work_orders_crud.complete_work_order(db_session, work_order.id, current_user)

    assert exc.value.status_code == 400
    db_session.refresh(metalon)
    assert metalon.quantity == Decimal("33")
    assert db_session.query(Warranty).count() == 1


def test_failed_completion_rolls_everything_back(db_session, reserved_work_order, current_user, monkeypatch):
    metalon, work_order, _ = reserved_work_order

    def broken_warranty(**kwargs):
        raise RuntimeError("warranty table unavailable")

    monkeypatch.setattr(work_orders_crud, "Warranty", broken_warranty)

    with pytest.raises(RuntimeError):
        work_orders_crud.complete_work_order(db_session, work_order.id, current_user)

    db_session.refresh(metalon)
    db_session.refresh(work_order)
    assert metalon.quantity == Decimal("45")
    assert metalon.reserved == Decimal("22")
    assert work_order.status == "CUTTING"
    reservation = db_session.query(StockReservation).filter_by(work_order_id=work_order.id).one()
    assert reservation.status == "RESERVED"
    assert movements_of(db_session, metalon, "OUT") == []


def test_cancel_order_releases_reservations(db_session, reserved_work_order, current_user):
    metalon, work_order, _ = reserved_work_order

    order = orders_crud.cancel_order(db_session, work_order.order_id, current_user, "Client gave up")

    assert order.status == "CANCELADO"
    db_session.refresh(metalon)
    assert metalon.quantity == Decimal("45")
    assert metalon.reserved == Decimal("10")
    reservation = db_session.query(StockReservation).filter_by(work_order_id=work_order.id).one()
    assert reservation.status == "CANCELLED"
    assert len(movements_of(db_session, metalon, "UNRESERVE")) == 1


def test_completed_order_cannot_be_cancelled(db_session, reserved_work_order, current_user):
    _, work_order, _ = reserved_work_order
    work_orders_crud.complete_work_order(db_session, work_order.id, current_user)

    with pytest.raises(HTTPException) as exc:
        orders_crud.cancel_order(db_session, work_order.order_id, current_user)
    assert exc.value.status_code == 400


def test_receive_stock_updates_weighted_average_cost(db_session, make_stock_item):
    item = make_stock_item(quantity=10, cost_avg=10)

    ledger.receive_stock(db_session, item, Decimal("10"), cost_unit=Decimal("20"))
    db_session.commit()
    db_session.refresh(item)

    assert item.quantity == Decimal("20")
    assert item.cost_avg == Decimal("15.00")
    assert len(movements_of(db_session, item, "IN")) == 1
