# backend/itamdb/apps/inventory/__init__.py
"""
Inventory app: consumable stock (storage, memory, network, peripherals).

`stock` on an item only changes through `services.apply_movement`, which
locks the item row, writes the new level and appends a movement in one
transaction, then records the activity entries after commit.
"""
