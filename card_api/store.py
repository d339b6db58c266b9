import json
import logging
import os
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from .domain import Card, Customer
from .exceptions import CustomerAlreadyExists, CustomerNotFound, IdMismatch

log = logging.getLogger("store")

CUSTOMERS_FILE = "clientes.json"
CARDS_FILE = "tarjetas.json"

DEMO_CUSTOMER = Customer(id="1", nombre="Cliente Demo", email="demo@banco.com", telefono="555-1234")
DEMO_CARD_NUMBER = "1234-5678-9012-3456"


def _data_dir() -> str:
    return os.environ.get("CARDS_DATA_DIR", os.path.join(os.getcwd(), "Data"))


class AccountStore:
    """Customers keyed by id and cards keyed by number, held in memory."""

    def __init__(self):
        self.customers: dict[str, Customer] = {}
        self.cards: dict[str, Card] = {}

    def clear(self):
        self.customers.clear()
        self.cards.clear()

    def find_card(self, number: str) -> Card | None:
        return self.cards.get(number)

    def find_customer(self, customer_id: str) -> Customer | None:
        return self.customers.get(customer_id)

    def list_customers(self) -> list[Customer]:
        return list(self.customers.values())

    def add_card(self, card: Card) -> bool:
        """Insert `card` unless its number is taken. Returns True if inserted."""
        if card.number in self.cards:
            return False
        self.cards[card.number] = card
        return True

    def create_customer(self, customer: Customer) -> Customer:
        if customer.id in self.customers:
            raise CustomerAlreadyExists(customer.id)
        self.customers[customer.id] = customer
        return customer

    def update_customer(self, customer_id: str, customer: Customer) -> Customer:
        if customer_id not in self.customers:
            raise CustomerNotFound(customer_id)
        if customer.id != customer_id:
            raise IdMismatch(customer_id, customer.id)
        self.customers[customer_id] = customer
        return customer

    def delete_customer(self, customer_id: str) -> None:
        if self.customers.pop(customer_id, None) is None:
            raise CustomerNotFound(customer_id)


def _read_items(path: str) -> list[dict]:
    with open(path, encoding="utf-8") as fh:
        items = json.load(fh)
    if not isinstance(items, list):
        raise ValueError(f"{path}: expected a JSON list")
    # accept PascalCase keys as well as the camelCase wire names
    return [{k[:1].lower() + k[1:]: v for k, v in item.items()} for item in items]


def load_seed(store: AccountStore, data_dir: str | None = None) -> None:
    """Load customers and cards from the seed files, falling back to demo data."""
    data_dir = data_dir or _data_dir()
    try:
        for item in _read_items(os.path.join(data_dir, CUSTOMERS_FILE)):
            customer = Customer.model_validate(item)
            store.customers.setdefault(customer.id, customer)
        for item in _read_items(os.path.join(data_dir, CARDS_FILE)):
            store.add_card(Card.model_validate(item))
    except (OSError, ValueError, AttributeError, ValidationError) as e:
        log.warning("seed load from %s failed (%s); using demo data", data_dir, e)
        seed_demo(store)
        return
    log.info("seed loaded %d customers and %d cards from %s", len(store.customers), len(store.cards), data_dir)


def seed_demo(store: AccountStore) -> None:
    store.customers.setdefault(DEMO_CUSTOMER.id, DEMO_CUSTOMER.model_copy())
    store.add_card(
        Card(
            numero=DEMO_CARD_NUMBER,
            clienteId=DEMO_CUSTOMER.id,
            saldo=Decimal("5000"),
            limite=Decimal("10000"),
            pin="1234",
            bloqueada=False,
            fechaVencimiento=date(2028, 12, 31),
        )
    )
    log.info("demo customer and card seeded")


store = AccountStore()
