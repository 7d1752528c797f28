from .gateway import DatabaseInventoryGateway, InventoryGateway, SaleTicket, TicketArena

__all__ = [
    "DatabaseInventoryGateway",
    "InventoryGateway",
    "SaleTicket",
    "TicketArena",
]
