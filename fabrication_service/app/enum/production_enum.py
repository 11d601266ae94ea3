from enum import Enum


class ServiceType(str, Enum):

    GATE = "PORTAO"
    POLYCARBONATE = "POLICARBONATO"
    AWNING = "TOLDO"
    FUNNEL = "FUNILARIA"
    WELDING = "SOLDA"
    OTHER = "OUTROS"


class OrderStatus(str, Enum):

    OPEN = "ABERTO"
    PRODUCTION = "EM_PRODUCAO"
    INSTALLATION = "EM_INSTALACAO"
    PAUSED = "PAUSADO"
    COMPLETED = "CONCLUIDO"
    CANCELLED = "CANCELADO"


class WorkOrderStatus(str, Enum):

    CUTTING = "CUTTING"
    WELDING = "WELDING"
    FINISHING = "FINISHING"
    PINTURA = "PINTURA"
    INSTALLATION = "INSTALLATION"
    TESTING = "TESTING"
    FINISHED = "FINISHED"


# shop floor order, FINISHED is only reached through completion
WORK_ORDER_STAGES = [
    WorkOrderStatus.CUTTING,
    WorkOrderStatus.WELDING,
    WorkOrderStatus.FINISHING,
    WorkOrderStatus.PINTURA,
    WorkOrderStatus.INSTALLATION,
    WorkOrderStatus.TESTING,
    WorkOrderStatus.FINISHED,
]


class WarrantyStatus(str, Enum):

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
