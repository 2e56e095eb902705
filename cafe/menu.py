import logging
from dataclasses import dataclass

from termcolor import cprint, colored

from cafe.accounts import AccountManager, Role
from cafe.database import DatabaseManager
from cafe.errors import CafeError
from cafe.helpers import Reader, print_options, read_choice, safe_float

log = logging.getLogger(__name__)


@dataclass
class MenuItem:
    """one row of the menu"""
    name: str
    type: str
    price: float
    description: str = ""
    image_url: str = ""

    def as_params(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "price": self.price,
            "description": self.description,
            "image_url": self.image_url,
        }


class MenuManager:
    """menu searches for everyone, item maintenance for managers"""
    def __init__(self, db: DatabaseManager, account_manager: AccountManager, read: Reader = input):
        self.db = db
        self.account_manager = account_manager
        self.read = read

    # lookups
    def search_by_name(self, name: str | None = None) -> int:
        """print items whose name equals name exactly"""
        if name is None:
            name = self.read(colored("enter the item name: ", "magenta"))
        count = self.db.print_query("SELECT * FROM Menu WHERE itemName = :name", {"name": name})
        if not count:
            cprint("no matching items", "yellow")
        return count

    def search_by_type(self, item_type: str | None = None) -> int:
        """print items whose type equals item_type exactly"""
        if item_type is None:
            item_type = self.read(colored("enter the item type: ", "magenta"))
        count = self.db.print_query("SELECT * FROM Menu WHERE type = :type", {"type": item_type})
        if not count:
            cprint("no matching items", "yellow")
        return count

    def price_of(self, name: str) -> float:
        """price of a menu item; raises if there is no such item"""
        price = self.db.scalar("SELECT price FROM Menu WHERE itemName = :name", {"name": name})
        if price is None:
            raise CafeError(f"no menu item named {name!r}")
        return float(price)

    # manager maintenance
    def _prompt_item(self, verb: str) -> MenuItem | None:
        """read all fields of an item; none if the price is invalid"""
        name = self.read(colored(f"enter the {verb} item name: ", "magenta")).strip()
        item_type = self.read(colored(f"enter the {verb} item type: ", "magenta")).strip()
        price = safe_float(self.read(colored(f"enter the {verb} item price: $", "magenta")), minimum=0)
        if price is None:
            cprint("invalid price", "red"); return None
        description = self.read(colored(f"enter the {verb} item description: ", "magenta"))
        image_url = self.read(colored(f"enter the {verb} image url: ", "magenta")).strip()
        return MenuItem(name, item_type, price, description, image_url)

    def add_item(self, login: str, item: MenuItem | None = None):
        """insert a menu item"""
        if not self.account_manager.require_role(login, Role.MANAGER):
            return
        if item is None:
            item = self._prompt_item("new")
            if item is None:
                return
        self.db.execute(
            """--sql
            INSERT INTO Menu (itemName, type, price, description, imageURL)
            VALUES (:name, :type, :price, :description, :image_url)
            """,
            item.as_params(),
        )
        log.info("%r added menu item %r", login, item.name)
        cprint("menu item added", "green")

    def delete_item(self, login: str, name: str | None = None) -> bool:
        """delete every menu row named name"""
        if not self.account_manager.require_role(login, Role.MANAGER):
            return False
        if name is None:
            name = self.read(colored("enter the item name to delete: ", "magenta"))
        result = self.db.execute("DELETE FROM Menu WHERE itemName = :name", {"name": name})
        if not result.rowcount:
            cprint("not found", "red"); return False
        log.info("%r deleted menu item %r", login, name)
        cprint("deleted", "green")
        return True

    def update_item(self, login: str, target: str | None = None, item: MenuItem | None = None) -> bool:
        """overwrite every field of the menu item named target"""
        if not self.account_manager.require_role(login, Role.MANAGER):
            return False
        if target is None:
            target = self.read(colored("enter the item name to update: ", "magenta"))
        if item is None:
            item = self._prompt_item("updated")
            if item is None:
                return False
        result = self.db.execute(
            """--sql
            UPDATE Menu
            SET itemName = :name, type = :type, price = :price,
                description = :description, imageURL = :image_url
            WHERE itemName = :target
            """,
            {**item.as_params(), "target": target},
        )
        if not result.rowcount:
            cprint("not found", "red"); return False
        log.info("%r updated menu item %r", login, target)
        cprint("updated", "green")
        return True

    # menu branch
    def browse(self, login: str):
        """search the menu; managers also get maintenance options"""
        options = {1: "search by item name", 2: "search by item type"}
        title = "please choose what you wish to do"
        if self.account_manager.has_role(login, Role.MANAGER):
            title = "===== manager's view ====="
            options |= {3: "add item to menu", 4: "delete item from menu", 5: "update item from menu"}
        print_options(title, options)

        choice = read_choice(self.read)
        if choice not in options:
            cprint("unrecognized choice!", "red")
        elif choice == 1:
            self.search_by_name()
        elif choice == 2:
            self.search_by_type()
        elif choice == 3:
            self.add_item(login)
        elif choice == 4:
            self.delete_item(login)
        elif choice == 5:
            self.update_item(login)
