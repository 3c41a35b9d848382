from __future__ import annotations

import threading

from sqlalchemy.orm import sessionmaker

from conftest import LEDGER_TABLES
from itamdb.apps.inventory import models as inventory_models
from itamdb.apps.inventory import schemas as inventory_schemas
from itamdb.apps.inventory import services as inventory_services
from itamdb.database import Base, build_engine
from itamdb.errors import InvalidState


def test_concurrent_outs_never_oversell(tmp_path):
    engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}")
    Base.metadata.create_all(bind=engine, tables=LEDGER_TABLES)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

    with Session() as db:
        item = inventory_services.create_item(
            db,
            payload=inventory_schemas.InventoryItemCreate(sku="CAB-CAT6", name="Cat6 cable", stock=10),
            actor_username="admin",
        )
        item_id = item.id

    barrier = threading.Barrier(2)
    results = {}

    def worker(qty):
        with Session() as db:
            barrier.wait()
            try:
                outcome = inventory_services.apply_movement(
                    db,
                    item_id=item_id,
                    movement_type="OUT",
                    qty=qty,
                    actor_username=f"worker-{qty}",
                )
                results[qty] = outcome.new_stock
            except InvalidState as exc:
                results[qty] = exc

    threads = [threading.Thread(target=worker, args=(qty,)) for qty in (6, 7)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    try:
        successes = {qty: value for qty, value in results.items() if isinstance(value, int)}
        failures = [value for value in results.values() if isinstance(value, InvalidState)]
        assert len(results) == 2
        assert len(successes) == 1
        assert len(failures) == 1

        with Session() as db:
            final = db.get(inventory_models.InventoryItem, item_id)
            assert final.stock in (3, 4)
            assert final.stock == 10 - next(iter(successes))
            movements = (
                db.query(inventory_models.InventoryMovement)
                .filter(inventory_models.InventoryMovement.inventory_item_id == item_id)
                .all()
            )
            assert len(movements) == 2
            assert inventory_services.replay_ledger(movements) == final.stock
    finally:
        engine.dispose()
