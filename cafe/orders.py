import logging
from datetime import datetime
from itertools import takewhile
from typing import Iterable, Iterator

from termcolor import cprint, colored

from cafe.accounts import AccountManager, Role
from cafe.config import FIRST_ORDER_ID, NEW_ITEM_STATUS, ORDER_SENTINEL, TIMESTAMP_FORMAT, UNPAID_WINDOW
from cafe.database import DatabaseManager
from cafe.errors import AccessDenied, CafeError
from cafe.helpers import Reader, as_bool, print_options, read_choice, read_int
from cafe.menu import MenuManager

log = logging.getLogger(__name__)


def timestamp(at: datetime | None = None) -> str:
    return (at or datetime.now()).strftime(TIMESTAMP_FORMAT)


class OrderCounter:
    """process-local order id source; ids only grow"""
    def __init__(self, start: int = FIRST_ORDER_ID):
        self._next = start

    @classmethod
    def from_database(cls, db: DatabaseManager) -> "OrderCounter":
        """start past the highest stored id so a restart does not reuse ids"""
        highest = db.scalar("SELECT MAX(orderid) FROM Orders")
        if highest is None:
            return cls()
        return cls(max(FIRST_ORDER_ID, int(highest) + 1))

    def next_id(self) -> int:
        oid = self._next
        self._next += 1
        return oid


class OrderManager:
    """place orders, mark them paid, add / remove items"""
    def __init__(self, db: DatabaseManager, account_manager: AccountManager, menu_manager: MenuManager,
                 counter: OrderCounter | None = None, read: Reader = input):
        self.db = db
        self.account_manager = account_manager
        self.menu_manager = menu_manager
        self.counter = counter or OrderCounter.from_database(db)
        self.read = read

    # order queries
    def fetch_order(self, order_id: int):
        """orders row or none"""
        rows = self.db.query(
            "SELECT orderid, login, paid, timeStampRecieved, total FROM Orders WHERE orderid = :oid",
            {"oid": order_id},
        )
        return rows[0] if rows else None

    def is_paid(self, order_id: int) -> bool:
        order = self.fetch_order(order_id)
        if order is None:
            raise CafeError(f"order #{order_id} not found")
        return as_bool(order[2])

    def print_order(self, order_id: int):
        self.db.print_query("SELECT * FROM Orders WHERE orderid = :oid", {"oid": order_id})

    def print_item_statuses(self, order_id: int):
        self.db.print_query("SELECT * FROM ItemStatus WHERE orderid = :oid", {"oid": order_id})

    def print_user_orders(self, login: str) -> int:
        count = self.db.print_query("SELECT * FROM Orders WHERE login = :login ORDER BY orderid", {"login": login})
        if not count:
            cprint("no orders found", "yellow")
        return count

    def print_recent_unpaid(self, now: datetime | None = None) -> int:
        """print unpaid orders received within the unpaid window"""
        cutoff = timestamp((now or datetime.now()) - UNPAID_WINDOW)
        count = self.db.print_query(
            """--sql
            SELECT * FROM Orders
            WHERE timeStampRecieved >= :cutoff AND paid = :paid
            ORDER BY orderid
            """,
            {"cutoff": cutoff, "paid": False},
        )
        if not count:
            cprint("no unpaid orders in the last 24 hours", "yellow")
        return count

    # item status rows
    def _insert_item_status(self, order_id: int, name: str):
        self.db.execute(
            """--sql
            INSERT INTO ItemStatus (orderid, itemName, lastUpdated, status, comments)
            VALUES (:oid, :name, :updated, :status, :comments)
            """,
            {"oid": order_id, "name": name, "updated": timestamp(),
             "status": NEW_ITEM_STATUS, "comments": ""},
        )

    def _delete_one_item_status(self, order_id: int, name: str) -> bool:
        """delete the first matching status row; false if there was none"""
        locator = self.db.row_locator
        if locator is None:
            raise CafeError(f"removing single items is not supported on {self.db.dialect}")
        # locator comes from ROW_LOCATORS only
        result = self.db.execute(
            f"""--sql
            DELETE FROM ItemStatus
            WHERE {locator} IN (
                SELECT {locator} FROM ItemStatus
                WHERE orderid = :oid AND itemName = :name
                LIMIT 1
            )
            """,
            {"oid": order_id, "name": name},
        )
        return result.rowcount > 0

    def _adjust_total(self, order_id: int, delta: float):
        self.db.execute(
            "UPDATE Orders SET total = total + :delta WHERE orderid = :oid",
            {"delta": delta, "oid": order_id},
        )

    # placing
    def _prompt_items(self) -> Iterator[str]:
        cprint(f"please enter the names of the items you want to add (enter {ORDER_SENTINEL} to complete order)", "green")
        while True:
            yield self.read(colored("enter the item you want to add: ", "magenta"))

    def place_order(self, login: str, items: Iterable[str] | None = None) -> int:
        """create an order and fill it until the sentinel; returns the order id"""
        order_id = self.counter.next_id()
        self.db.execute(
            """--sql
            INSERT INTO Orders (orderid, login, paid, timeStampRecieved, total)
            VALUES (:oid, :login, :paid, :received, :total)
            """,
            {"oid": order_id, "login": login, "paid": False, "received": timestamp(), "total": 0},
        )
        log.info("%r opened order #%d", login, order_id)

        entries = self._prompt_items() if items is None else items
        total = 0.0
        for name in takewhile(lambda n: n.strip() != ORDER_SENTINEL, entries):
            name = name.strip()
            try:
                price = self.menu_manager.price_of(name)
            except CafeError as e:
                cprint(str(e), "red")
                continue
            self._insert_item_status(order_id, name)
            total += price
            self.print_item_statuses(order_id)

        self.db.execute("UPDATE Orders SET total = :total WHERE orderid = :oid", {"total": total, "oid": order_id})
        log.info("order #%d placed, total %.2f", order_id, total)
        cprint(f"order #{order_id} placed", "green")
        self.print_order(order_id)
        return order_id

    # updating
    def mark_paid(self, login: str, order_id: int, confirm: str | None = None) -> bool:
        """manager / employee: mark an unpaid order paid after confirmation"""
        if not self.account_manager.has_role(login, Role.MANAGER, Role.EMPLOYEE):
            raise AccessDenied("manager or employee privileges required")
        if self.is_paid(order_id):
            cprint("it has already been paid.", "yellow"); return False
        if confirm is None:
            confirm = self.read(colored(f"type yes to mark order #{order_id} paid: ", "yellow"))
        if confirm.strip().lower() != "yes":
            cprint("cancelled", "yellow"); return False
        self.db.execute("UPDATE Orders SET paid = :paid WHERE orderid = :oid", {"paid": True, "oid": order_id})
        log.info("%r marked order #%d paid", login, order_id)
        cprint(f"order #{order_id} marked paid", "green")
        return True

    def _ensure_mutable(self, login: str, order_id: int):
        """own and unpaid, or raise"""
        order = self.fetch_order(order_id)
        if order is None or (order[1] or "").strip() != login:
            raise CafeError(f"order #{order_id} not found")
        if as_bool(order[2]):
            raise CafeError("it has already been paid.")

    def add_item(self, login: str, order_id: int, name: str | None = None):
        """append an item to an own unpaid order"""
        self._ensure_mutable(login, order_id)
        if name is None:
            name = self.read(colored("enter new item: ", "magenta"))
        name = name.strip()
        price = self.menu_manager.price_of(name)
        self._insert_item_status(order_id, name)
        self._adjust_total(order_id, price)
        log.info("%r added %r to order #%d", login, name, order_id)
        cprint(f"added {name} to order #{order_id}", "green")
        self.print_item_statuses(order_id)
        self.print_order(order_id)

    def remove_item(self, login: str, order_id: int, name: str | None = None):
        """remove one instance of an item from an own unpaid order"""
        self._ensure_mutable(login, order_id)
        if name is None:
            name = self.read(colored("enter item you want to delete: ", "magenta"))
        name = name.strip()
        price = self.menu_manager.price_of(name)
        if not self._delete_one_item_status(order_id, name):
            raise CafeError(f"{name} is not in order #{order_id}")
        self._adjust_total(order_id, -price)
        log.info("%r removed %r from order #%d", login, name, order_id)
        cprint(f"removed {name} from order #{order_id}", "green")
        self.print_item_statuses(order_id)
        self.print_order(order_id)

    def update_order(self, login: str):
        """staff settle recent orders; customers edit their own"""
        if self.account_manager.has_role(login, Role.MANAGER, Role.EMPLOYEE):
            self.print_recent_unpaid()
            order_id = read_int(self.read, colored("enter order id you wish to update: ", "magenta"))
            self.mark_paid(login, order_id)
            return

        if not self.print_user_orders(login):
            return
        order_id = read_int(self.read, colored("enter your order id: ", "magenta"))
        self._ensure_mutable(login, order_id)
        print_options("please choose what you wish to do", {1: "add an item", 2: "remove an item"})
        choice = read_choice(self.read)
        if choice == 1:
            self.add_item(login, order_id)
        elif choice == 2:
            self.remove_item(login, order_id)
        else:
            cprint("unrecognized choice!", "red")
