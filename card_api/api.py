import logging
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Union

from fastapi import APIRouter, Response, status
from pydantic import AllowInfNan, BaseModel, Field, Strict, StrictBool, StrictInt, StrictStr

from . import repo
from .domain import CardNumber, Customer, as_number

log = logging.getLogger("api")
router = APIRouter()
customers = APIRouter(prefix="/api/clientes", tags=["clientes"])
cards = APIRouter(prefix="/api/tarjetas", tags=["tarjetas"])

# JSON accepts Infinity and NaN literals; no amount may be either
FiniteFloat = Annotated[float, Strict(), AllowInfNan(False)]
Number = Union[StrictInt, FiniteFloat]


def to_decimal(x: Number) -> Decimal:
    return Decimal(str(x))


# amount sign is checked in repo, after the blocked check
class Money(BaseModel):
    monto: Number


class BlockBody(BaseModel):
    bloquear: StrictBool


class PinChangeBody(BaseModel):
    pin_actual: StrictStr = Field(..., alias="pinActual")
    nuevo_pin: StrictStr = Field(..., alias="nuevoPin")


class LimitBody(BaseModel):
    nuevo_limite: Number = Field(..., alias="nuevoLimite")


def customer_json(c: Customer) -> dict:
    return c.model_dump(by_alias=True)


@router.get("/")
def root():
    return {"status": "ok", "message": "Welcome to the Credit Card API", "docs": "/docs"}


@router.get("/health")
def health():
    return {"status": "ok"}


# ---- customers ----

@customers.get("")
def list_customers():
    return [customer_json(c) for c in repo.list_customers()]


@customers.get("/{customer_id}")
def get_customer(customer_id: str):
    return customer_json(repo.get_customer(customer_id))


@customers.post("", status_code=status.HTTP_201_CREATED)
def create_customer(body: Customer, response: Response):
    created = repo.create_customer(body)
    response.headers["Location"] = f"{customers.prefix}/{created.id}"
    return customer_json(created)


@customers.put("/{customer_id}")
def update_customer(customer_id: str, body: Customer):
    return customer_json(repo.update_customer(customer_id, body))


@customers.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: str):
    repo.delete_customer(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- cards ----

@cards.get("/{numero}/saldo")
def get_balance(numero: str = CardNumber):
    bal, limit = repo.get_balance(numero)
    return {"saldo": as_number(bal), "limite": as_number(limit), "fechaConsulta": datetime.now().isoformat()}


@cards.post("/{numero}/pagar")
def pay(numero: str = CardNumber, body: Money = ...):
    new_bal = repo.pay(numero, to_decimal(body.monto))
    return {"nuevoSaldo": as_number(new_bal), "mensaje": "Payment completed successfully"}


@cards.get("/{numero}/movimientos")
def movements(numero: str = CardNumber):
    return [tx.as_json() for tx in repo.movements(numero)]


@cards.put("/{numero}/bloquear")
def block(numero: str = CardNumber, body: BlockBody = ...):
    blocked = repo.set_blocked(numero, body.bloquear)
    return {"mensaje": f"Card {'blocked' if blocked else 'unblocked'} successfully", "bloqueada": blocked}


@cards.put("/{numero}/cambiar-pin")
def change_pin(numero: str = CardNumber, body: PinChangeBody = ...):
    repo.change_pin(numero, body.pin_actual, body.nuevo_pin)
    return {"mensaje": "PIN updated successfully"}


@cards.put("/{numero}/renovar")
def renew(numero: str = CardNumber):
    expires_on = repo.renew(numero)
    return {"mensaje": "Card renewed", "nuevaFecha": expires_on.isoformat()}


@cards.put("/{numero}/aumentar-limite")
def raise_limit(numero: str = CardNumber, body: LimitBody = ...):
    new_limit = repo.raise_limit(numero, to_decimal(body.nuevo_limite))
    return {"mensaje": "Limit updated", "nuevoLimite": as_number(new_limit)}


@cards.post("/{numero}/consumo")
def charge(numero: str = CardNumber, body: Money = ...):
    new_bal = repo.charge(numero, to_decimal(body.monto))
    return {"mensaje": "Charge registered", "nuevoSaldo": as_number(new_bal)}
