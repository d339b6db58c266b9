import logging
import re
from decimal import Decimal
from threading import RLock

from .domain import MAX_AMOUNT, Card, Customer, Transaction, add_years
from .exceptions import (
    CardBlocked,
    CardNotFound,
    CreditLimitExceeded,
    CustomerNotFound,
    InvalidAmount,
    InvalidPin,
    LimitNotIncreased,
    LimitOutOfRange,
    WrongPin,
)
from .ledger import ledger
from .store import store

log = logging.getLogger("repo")

# guards the store and the ledger together: lookup + validate + mutate + record
lock = RLock()

PIN_RE = re.compile(r"[0-9]{4}")


def _card(number: str) -> Card:
    card = store.find_card(number)
    if card is None:
        log.info("card %s not found", number)
        raise CardNotFound(number)
    return card


def _usable_card(number: str) -> Card:
    card = _card(number)
    if card.blocked:
        log.info("card %s is blocked", number)
        raise CardBlocked(number)
    return card


def _valid_amount(amount: Decimal):
    if not amount.is_finite() or not 0 < amount <= MAX_AMOUNT:
        raise InvalidAmount()


# ---- customers ----

def list_customers() -> list[Customer]:
    with lock:
        return store.list_customers()


def get_customer(customer_id: str) -> Customer:
    with lock:
        customer = store.find_customer(customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


def create_customer(customer: Customer) -> Customer:
    with lock:
        created = store.create_customer(customer)
    log.info("create_customer id=%s", customer.id)
    return created


def update_customer(customer_id: str, customer: Customer) -> Customer:
    with lock:
        updated = store.update_customer(customer_id, customer)
    log.info("update_customer id=%s", customer_id)
    return updated


def delete_customer(customer_id: str) -> None:
    with lock:
        store.delete_customer(customer_id)
    log.info("delete_customer id=%s", customer_id)


# ---- cards ----

def get_balance(number: str) -> tuple[Decimal, Decimal]:
    with lock:
        card = _card(number)
        return card.balance, card.limit


def pay(number: str, amount: Decimal) -> Decimal:
    with lock:
        card = _usable_card(number)
        _valid_amount(amount)
        # no floor: a payment may take the balance below zero
        card.balance -= amount
        ledger.record(number, amount, "Payment")
        new_bal = card.balance
    log.info("pay card=%s amount=%s new_balance=%s", number, amount, new_bal)
    return new_bal


def charge(number: str, amount: Decimal) -> Decimal:
    with lock:
        card = _usable_card(number)
        _valid_amount(amount)
        if card.balance + amount > card.limit:
            log.info("charge over limit card=%s amount=%s balance=%s limit=%s",
                     number, amount, card.balance, card.limit)
            raise CreditLimitExceeded()
        card.balance += amount
        ledger.record(number, amount, "Charge")
        new_bal = card.balance
    log.info("charge card=%s amount=%s new_balance=%s", number, amount, new_bal)
    return new_bal


def set_blocked(number: str, blocked: bool) -> bool:
    with lock:
        card = _card(number)
        card.blocked = blocked
        ledger.record(number, Decimal("0"), "Block" if blocked else "Unblock")
    log.info("set_blocked card=%s blocked=%s", number, blocked)
    return blocked


def change_pin(number: str, current_pin: str, new_pin: str) -> None:
    with lock:
        card = _usable_card(number)
        if card.pin != current_pin:
            raise WrongPin()
        if not PIN_RE.fullmatch(new_pin):
            raise InvalidPin()
        card.pin = new_pin
    log.info("change_pin card=%s", number)


def raise_limit(number: str, new_limit: Decimal) -> Decimal:
    with lock:
        card = _usable_card(number)
        if not new_limit.is_finite() or new_limit > MAX_AMOUNT:
            raise LimitOutOfRange()
        if new_limit <= card.limit:
            raise LimitNotIncreased()
        card.limit = new_limit
    log.info("raise_limit card=%s new_limit=%s", number, new_limit)
    return new_limit


def renew(number: str):
    with lock:
        card = _usable_card(number)
        card.expires_on = add_years(card.expires_on, 2)
        ledger.record(number, Decimal("0"), "Renewal")
        expires_on = card.expires_on
    log.info("renew card=%s expires_on=%s", number, expires_on)
    return expires_on


def movements(number: str) -> list[Transaction]:
    with lock:
        _card(number)
        return ledger.recent_history(number)
