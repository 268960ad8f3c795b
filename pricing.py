# pricing.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence

ROUND = ROUND_HALF_UP
ZERO = Decimal("0")
ONE = Decimal("1")
CEM = Decimal("100")

PAID_TRAFFIC = "PAID_TRAFFIC"

# o desconto de pacote só vale com exatamente dois sub-serviços
QTD_PACOTE = 2


def D(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if x is None:
        return ZERO
    if isinstance(x, (int, float)):
        return Decimal(str(x))
    s = str(x).strip()
    # aceita "1.234,56" e "1234,56"
    if '.' in s and ',' in s and s.rfind(',') > s.rfind('.'):
        s = s.replace('.', '').replace(',', '.')
    else:
        s = s.replace(',', '.')
    return Decimal(s or '0')


def q2(x) -> Decimal:
    return D(x).quantize(Decimal('0.01'), rounding=ROUND)


class ReferenciaInvalida(LookupError):
    """Sub-serviço ou plano que não pertence ao serviço informado."""

    def __init__(self, tipo: str, ref_id: str, service_id: Optional[str] = None):
        self.tipo = tipo
        self.ref_id = ref_id
        self.service_id = service_id
        super().__init__(f"{tipo} com ID {ref_id} não encontrado")


# ---------------------------------------------------------------------
# Modelos
# ---------------------------------------------------------------------
@dataclass
class Selecao:
    """O que o cliente escolheu dentro de um serviço."""
    sub_service_ids: List[str] = field(default_factory=list)
    plan_id: Optional[str] = None

    @classmethod
    def de(cls, sub_service_id: Optional[str] = None,
           sub_service_ids: Optional[Sequence[str]] = None,
           plan_id: Optional[str] = None) -> "Selecao":
        ids: List[str] = []
        for sid in (sub_service_ids or []) or ([sub_service_id] if sub_service_id else []):
            if sid and sid not in ids:
                ids.append(sid)
        return cls(sub_service_ids=ids, plan_id=plan_id or None)


@dataclass
class DescontoPersonalizado:
    enabled: bool = False
    type: str = "percentage"   # percentage | fixed
    value: Decimal = ZERO

    @property
    def multiplicador(self) -> Decimal:
        if self.enabled and self.type == "percentage":
            return ONE - D(self.value) / CEM
        return ONE

    @property
    def valor_fixo(self) -> Decimal:
        if self.enabled and self.type == "fixed":
            return D(self.value)
        return ZERO


@dataclass
class LinhaContrato:
    """Uma linha = um contrato + um pagamento inicial."""
    valor_bruto: Decimal
    valor: Decimal
    sub_service: Any = None
    plan: Any = None

    @property
    def com_desconto(self) -> bool:
        return self.valor < q2(self.valor_bruto)


# ---------------------------------------------------------------------
# Motor de precificação
# ---------------------------------------------------------------------
class MotorPrecificacao:
    """
    Calcula o valor de cada linha de contrato a partir do serviço escolhido.

    O serviço é lido por atributos (type, base_price, sub_services, plans,
    traffic_discount), então serve tanto o model do banco quanto um objeto
    simples nos testes. Ordem das regras:
      1. PAID_TRAFFIC com sub-serviços: soma dos preços; com exatamente dois
         e traffic_discount habilitado, aplica o percentual do pacote;
      2. plano escolhido: preço do plano;
      3. um sub-serviço (fora de PAID_TRAFFIC): preço do sub-serviço;
      4. senão: base_price do serviço.
    O desconto personalizado do cliente vem depois, linha a linha.
    """

    # ------------------------- lookups -------------------------

    @staticmethod
    def sub_servico(service, sub_service_id: str):
        for sub in getattr(service, "sub_services", None) or []:
            if sub.id == sub_service_id:
                return sub
        raise ReferenciaInvalida("Sub-serviço", sub_service_id, getattr(service, "id", None))

    @staticmethod
    def plano(service, plan_id: str):
        for plan in getattr(service, "plans", None) or []:
            if plan.id == plan_id:
                return plan
        raise ReferenciaInvalida("Plano", plan_id, getattr(service, "id", None))

    @staticmethod
    def multiplicador_pacote(service, quantidade: int) -> Decimal:
        cfg: Dict[str, Any] = getattr(service, "traffic_discount", None) or {}
        if quantidade != QTD_PACOTE or not cfg.get("enabled"):
            return ONE
        perc = D(cfg.get("percentage"))
        if perc <= 0:
            return ONE
        return ONE - perc / CEM

    def referencias(self, service, selecao: Selecao):
        """
        Resolve todos os ids da seleção contra o serviço, inclusive os que não
        entram no preço. Qualquer id desconhecido levanta ReferenciaInvalida.
        """
        subs = [self.sub_servico(service, sid) for sid in selecao.sub_service_ids]
        plan = self.plano(service, selecao.plan_id) if selecao.plan_id else None
        return subs, plan

    @staticmethod
    def _e_trafego(service, subs) -> bool:
        return getattr(service, "type", None) == PAID_TRAFFIC and bool(subs)

    # ------------------------- valores -------------------------

    def valor_base(self, service, selecao: Selecao) -> Decimal:
        """Valor da seleção antes do desconto personalizado."""
        subs, plan = self.referencias(service, selecao)
        return self._valor(service, subs, plan)

    def _valor(self, service, subs, plan) -> Decimal:
        if self._e_trafego(service, subs):
            total = sum((D(s.price) for s in subs), ZERO)
            return q2(total * self.multiplicador_pacote(service, len(subs)))
        if plan is not None:
            return q2(plan.price)
        if subs:
            return q2(subs[0].price)
        return q2(getattr(service, "base_price", ZERO))

    @staticmethod
    def aplica_desconto(valor, desconto: Optional[DescontoPersonalizado]) -> Decimal:
        """Desconto do cliente sobre UMA linha; o fixo é abatido em cada linha."""
        v = D(valor)
        if desconto is not None and desconto.enabled:
            v = v * desconto.multiplicador
            fixo = desconto.valor_fixo
            if fixo > 0:
                v = v - fixo
        return q2(max(ZERO, v))

    def linhas(self, service, selecao: Selecao,
               desconto: Optional[DescontoPersonalizado] = None) -> List[LinhaContrato]:
        """
        PAID_TRAFFIC com sub-serviços gera uma linha por sub-serviço, cada uma
        com o próprio preço x multiplicador do pacote. Os demais casos geram
        uma linha só.
        """
        subs, plan = self.referencias(service, selecao)
        if self._e_trafego(service, subs):
            mult = self.multiplicador_pacote(service, len(subs))
            return [
                LinhaContrato(
                    valor_bruto=D(sub.price),
                    valor=self.aplica_desconto(D(sub.price) * mult, desconto),
                    sub_service=sub,
                )
                for sub in subs
            ]

        sub = subs[0] if plan is None and subs else None
        bruto = self._valor(service, subs, plan)
        return [LinhaContrato(
            valor_bruto=bruto,
            valor=self.aplica_desconto(bruto, desconto),
            sub_service=sub,
            plan=plan,
        )]
