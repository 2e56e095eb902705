import logging
import signal
import sys
from typing import Callable

from colorama import just_fix_windows_console as enable_windows_ansi_interpretation
from sqlalchemy.exc import SQLAlchemyError
from termcolor import cprint, colored

from cafe.accounts import AccountManager
from cafe.database import DatabaseManager
from cafe.errors import CafeError
from cafe.helpers import Reader, print_options, read_choice
from cafe.logger import log_startup, setup_logging
from cafe.menu import MenuManager
from cafe.orders import OrderCounter, OrderManager

log = logging.getLogger(__name__)

USAGE = "usage: cafe <dbname> <port> <user>"

MAIN_OPTIONS = {1: "create user", 2: "log in", 9: "< exit"}
USER_OPTIONS = {
    1: "goto menu",
    2: "update profile",
    3: "place an order",
    4: "update an order",
    9: "log out",
}

HANDLED_ERRORS = (CafeError, SQLAlchemyError, ValueError)


def greeting():
    cprint("""
*******************************************************
              café ordering system
*******************************************************
""", "green", attrs=["bold"])


def error_message(e: Exception) -> str:
    """driver errors carry the useful text on .orig"""
    return str(getattr(e, "orig", None) or e).strip()


class CafeCLI:
    """numbered menus over the account, menu and order managers"""
    def __init__(self, db: DatabaseManager, read: Reader = input, counter: OrderCounter | None = None):
        self.db = db
        self.read = read
        self.account_manager = AccountManager(db, read)
        self.menu_manager = MenuManager(db, self.account_manager, read)
        self.order_manager = OrderManager(db, self.account_manager, self.menu_manager, counter, read)
        self.current_user: str | None = None

    def run_handler(self, handler: Callable, *args):
        """run one menu branch; failures are printed and the menu carries on"""
        try:
            return handler(*args)
        except HANDLED_ERRORS as e:
            log.error("%s failed: %s", getattr(handler, "__name__", handler), error_message(e))
            cprint(error_message(e), "red")
            return None

    def log_in(self):
        login = self.run_handler(self.account_manager.login)
        if login:
            self.current_user = login

    def log_out(self):
        log.info("%r logged out", self.current_user)
        cprint(f"logged out {self.current_user}", "green")
        self.current_user = None

    def update_profile(self):
        login = self.run_handler(self.account_manager.update_profile, self.current_user)
        if login:
            self.current_user = login

    def user_menu(self):
        """loop until log out"""
        while self.current_user is not None:
            print_options("main menu", USER_OPTIONS)
            choice = read_choice(self.read)
            if choice == 1:
                self.run_handler(self.menu_manager.browse, self.current_user)
            elif choice == 2:
                self.update_profile()
            elif choice == 3:
                self.run_handler(self.order_manager.place_order, self.current_user)
            elif choice == 4:
                self.run_handler(self.order_manager.update_order, self.current_user)
            elif choice == 9:
                self.log_out()
            else:
                cprint("unrecognized choice!", "red")

    def run(self):
        """top-level loop; returns when the user exits or input ends"""
        try:
            while True:
                print_options("main menu", MAIN_OPTIONS)
                choice = read_choice(self.read)
                if choice == 1:
                    self.run_handler(self.account_manager.create_user)
                elif choice == 2:
                    self.log_in()
                elif choice == 9:
                    return
                else:
                    cprint("unrecognized choice!", "red")
                if self.current_user is not None:
                    self.user_menu()
        except EOFError:
            print()


# signal handler
class SignalHandler:
    """ctrl+c leaves without a traceback"""
    @staticmethod
    def sigint(_, __):
        cprint("\nnext time, use exit!", "yellow")
        sys.exit(0)


def main(argv: list[str] | None = None) -> int:
    """entrypoint: cafe <dbname> <port> <user>"""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 3:
        print(USAGE, file=sys.stderr)
        return 0

    enable_windows_ansi_interpretation()
    signal.signal(signal.SIGINT, SignalHandler.sigint)
    setup_logging()
    greeting()

    dbname, port, user = args
    print("connecting to database...")
    try:
        db = DatabaseManager.connect(dbname, port, user)
    except (SQLAlchemyError, ValueError) as e:
        log.error("unable to connect: %s", error_message(e))
        cprint(f"error - unable to connect to database: {error_message(e)}", "red", file=sys.stderr)
        print("make sure you started postgres on this machine", file=sys.stderr)
        return 1
    log_startup(f"{dbname} on port {port} as {user}")
    cprint("done", "green")

    try:
        CafeCLI(db).run()
    finally:
        print("disconnecting from database...", end="")
        db.close()
        print(colored("done\n\nbye!", "green"))
    return 0
