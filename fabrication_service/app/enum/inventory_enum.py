from enum import Enum


class StockCategory(str, Enum):

    METAL = "METAL"
    SHEET = "CHAPA"
    POLY = "POLICARBONATO"
    AUTOMATION = "AUTOMACAO"
    TOOLS = "FERRAMENTAS"
    CONSUMABLE = "CONSUMIVEIS"
    PAINT = "PINTURA"
    FIXING = "FIXACAO"
    OTHER = "OUTROS"


class StockHealth(str, Enum):

    OK = "OK"
    LOW = "LOW"
    CRITICAL = "CRITICAL"


class StockMovementType(str, Enum):

    IN = "IN"
    OUT = "OUT"
    ADJUST = "ADJUST"
    RESERVE = "RESERVE"
    UNRESERVE = "UNRESERVE"


class StockReservationStatus(str, Enum):

    RESERVED = "RESERVED"
    CONSUMED = "CONSUMED"
    CANCELLED = "CANCELLED"


class PurchaseOrderStatus(str, Enum):

    DRAFT = "RASCUNHO"
    SENT = "ENVIADO"
    RECEIVED = "RECEBIDO"
    CANCELLED = "CANCELADO"
