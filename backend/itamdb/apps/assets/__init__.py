# backend/itamdb/apps/assets/__init__.py
"""
Assets app: tracked hardware (laptops, servers, network gear, printers).

Assets can be the target of an inventory movement when stock is issued to
them; the link lives on the movement row, not here.
"""
