import pytest
from sqlalchemy import text

from cafe.accounts import AccountManager
from cafe.database import DatabaseManager
from cafe.menu import MenuManager
from cafe.orders import OrderCounter, OrderManager

# the real tables live outside the program; this mirrors their columns
SCHEMA = [
    "CREATE TABLE Users (login TEXT, password TEXT, phoneNum TEXT, favItems TEXT, type TEXT)",
    "CREATE TABLE Menu (itemName TEXT, type TEXT, price REAL, description TEXT, imageURL TEXT)",
    "CREATE TABLE Orders (orderid INTEGER, login TEXT, paid BOOLEAN, timeStampRecieved TEXT, total REAL)",
    "CREATE TABLE ItemStatus (orderid INTEGER, itemName TEXT, lastUpdated TEXT, status TEXT, comments TEXT)",
]

USERS = [
    {"login": "alice", "password": "pw", "phone": "555-0101", "type": "Customer"},
    {"login": "bob", "password": "pw", "phone": "555-0102", "type": "Customer"},
    {"login": "erin", "password": "pw", "phone": "555-0103", "type": "Employee"},
    {"login": "mary", "password": "pw", "phone": "555-0104", "type": "Manager"},
]

MENU = [
    {"name": "Latte", "type": "Drinks", "price": 4.5, "description": "espresso and milk", "image_url": ""},
    {"name": "Espresso", "type": "Drinks", "price": 3.0, "description": "short and strong", "image_url": ""},
    {"name": "Iced Latte", "type": "Cold Drinks", "price": 5.0, "description": "latte over ice", "image_url": ""},
    {"name": "Bagel", "type": "Food", "price": 2.25, "description": "toasted", "image_url": ""},
]


class Script:
    """stands in for input(): hands out answers in order, then signals end of input"""
    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.prompts: list[str] = []

    def __call__(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)


@pytest.fixture
def db():
    database = DatabaseManager("sqlite://")
    for ddl in SCHEMA:
        database.conn.exec_driver_sql(ddl)
    database.conn.execute(
        text("INSERT INTO Users (login, password, phoneNum, favItems, type) "
             "VALUES (:login, :password, :phone, '', :type)"),
        USERS,
    )
    database.conn.execute(
        text("INSERT INTO Menu (itemName, type, price, description, imageURL) "
             "VALUES (:name, :type, :price, :description, :image_url)"),
        MENU,
    )
    yield database
    database.close()


@pytest.fixture
def accounts(db):
    return AccountManager(db, Script())


@pytest.fixture
def menu(db, accounts):
    return MenuManager(db, accounts, Script())


@pytest.fixture
def orders(db, accounts, menu):
    return OrderManager(db, accounts, menu, OrderCounter(), Script())


@pytest.fixture
def script():
    return Script
