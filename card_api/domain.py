import calendar
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP

from fastapi import Path
from pydantic import BaseModel, ConfigDict, Field

CardNumber = Path(
    ...,
    min_length=1,
    max_length=64,
    description="Card number, e.g. 1234-5678-9012-3456",
)

RECENT_HISTORY_SIZE = 10

# largest amount or limit accepted; keeps balances well inside Decimal's 28 digits
MAX_AMOUNT = Decimal("999999999999999.99")


def q2(x: Decimal) -> Decimal:
    return x.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def as_number(x: Decimal) -> float:
    return float(q2(x))


def add_years(d: date, years: int) -> date:
    """Shift `d` by whole years; Feb 29 lands on Feb 28 in non-leap years."""
    year = d.year + years
    day = min(d.day, calendar.monthrange(year, d.month)[1])
    return d.replace(year=year, day=day)


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Customer(_Model):
    id: str = Field(..., min_length=1)
    name: str = Field("", alias="nombre")
    email: str = ""
    phone: str = Field("", alias="telefono")


class Card(_Model):
    number: str = Field(..., alias="numero", min_length=1)
    customer_id: str = Field("", alias="clienteId")
    balance: Decimal = Field(Decimal("0"), alias="saldo")
    limit: Decimal = Field(Decimal("0"), alias="limite")
    pin: str = ""
    blocked: bool = Field(False, alias="bloqueada")
    expires_on: date = Field(..., alias="fechaVencimiento")


class Transaction(_Model):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    card_number: str = Field(..., alias="tarjetaNumero")
    amount: Decimal = Field(..., alias="monto")
    timestamp: datetime = Field(default_factory=datetime.now, alias="fecha")
    kind: str = Field(..., alias="tipo")

    def as_json(self) -> dict:
        return {
            "id": self.id,
            "tarjetaNumero": self.card_number,
            "monto": as_number(self.amount),
            "fecha": self.timestamp.isoformat(),
            "tipo": self.kind,
        }
