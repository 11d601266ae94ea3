from enum import Enum


class LeadStage(str, Enum):

    NEW = "NOVO"
    CONTACT = "CONTATO"
    VISIT = "VISITA"
    QUOTE = "ORCAMENTO"
    NEGOTIATION = "NEGOCIACAO"
    WON = "FECHADO"
    EXECUTING = "EM_EXECUCAO"
    COMPLETED = "CONCLUIDO"
    POST_SALES = "POS_VENDA"
    LOST = "PERDIDO"


class LeadPriority(str, Enum):

    LOW = "BAIXA"
    MEDIUM = "MEDIA"
    HIGH = "ALTA"


class VisitStatus(str, Enum):

    SCHEDULED = "AGENDADA"
    COMPLETED = "REALIZADA"
    RESCHEDULED = "REMARCADA"
    CANCELLED = "CANCELADA"


class QuoteStatus(str, Enum):

    DRAFT = "RASCUNHO"
    SENT = "ENVIADO"
    APPROVED = "APROVADO"
    REJECTED = "REJEITADO"
    EXPIRED = "EXPIRADO"


CONVERTIBLE_QUOTE_STATUSES = {QuoteStatus.DRAFT, QuoteStatus.SENT, QuoteStatus.APPROVED}
