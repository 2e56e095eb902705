import logging
from enum import Enum

from termcolor import cprint, colored

from cafe.database import DatabaseManager
from cafe.errors import AccessDenied, CafeError
from cafe.helpers import Reader, print_options, read_choice

log = logging.getLogger(__name__)


class Role(Enum):
    CUSTOMER = "Customer"
    EMPLOYEE = "Employee"
    MANAGER = "Manager"


# menu choice -> (label, Users column); the last one is manager only
PROFILE_FIELDS = {
    1: ("login", "login"),
    2: ("phone number", "phoneNum"),
    3: ("password", "password"),
    4: ("favorite items", "favItems"),
    5: ("user type", "type"),
}
MANAGER_ONLY_FIELDS = {"type"}


class AccountManager:
    """user accounts, login and per-action role checks (plain text passwords, as stored)"""
    def __init__(self, db: DatabaseManager, read: Reader = input):
        self.db = db
        self.read = read

    def create_user(self, login: str | None = None, password: str | None = None, phone: str | None = None):
        """insert a customer with empty favorites; duplicate logins are not checked"""
        if login is None:
            login = self.read(colored("\tenter user login: ", "magenta"))
        if password is None:
            password = self.read(colored("\tenter user password: ", "magenta"))
        if phone is None:
            phone = self.read(colored("\tenter user phone: ", "magenta"))
        self.db.execute(
            """--sql
            INSERT INTO Users (phoneNum, login, password, favItems, type)
            VALUES (:phone, :login, :password, :fav_items, :type)
            """,
            {"phone": phone, "login": login, "password": password,
             "fav_items": "", "type": Role.CUSTOMER.value},
        )
        log.info("created user %r", login)
        cprint("user successfully created!", "green")

    def login(self, login: str | None = None, password: str | None = None) -> str | None:
        """return the login when exactly one user matches, else none"""
        if login is None:
            login = self.read(colored("\tenter user login: ", "magenta"))
        if password is None:
            password = self.read(colored("\tenter user password: ", "magenta"))
        matches = self.db.count(
            "SELECT login FROM Users WHERE login = :login AND password = :password",
            {"login": login, "password": password},
        )
        if matches != 1:
            log.warning("failed login for %r (%d matches)", login, matches)
            cprint("invalid login or password", "red")
            return None
        log.info("%r logged in", login)
        cprint(f"logged in as {colored(login, 'yellow', attrs=['bold'])}", "green")
        return login

    def has_role(self, login: str, *roles: Role) -> bool:
        """fresh lookup: true if login currently holds any of roles"""
        rows = self.db.query("SELECT type FROM Users WHERE login = :login", {"login": login})
        wanted = {r.value for r in roles}
        # char(n) columns come back space padded
        return any(row[0] is not None and row[0].strip() in wanted for row in rows)

    def require_role(self, login: str, *roles: Role) -> bool:
        """guard for gated actions"""
        if self.has_role(login, *roles):
            return True
        names = " or ".join(r.value.lower() for r in roles)
        cprint(f"{names} privileges required", "red")
        return False

    def user_exists(self, login: str) -> bool:
        return self.db.count("SELECT login FROM Users WHERE login = :login", {"login": login}) > 0

    def set_field(self, login: str, target: str, column: str, value: str) -> str:
        """update one profile column of target on behalf of login; returns the session login"""
        if column not in {c for _, c in PROFILE_FIELDS.values()}:
            raise CafeError(f"unknown profile field {column!r}")
        is_manager = self.has_role(login, Role.MANAGER)
        if target != login and not is_manager:
            raise AccessDenied("only managers can update other users")
        if column in MANAGER_ONLY_FIELDS and not is_manager:
            raise AccessDenied("only managers can change user types")
        if column == "type":
            try:
                value = Role(value.strip().capitalize()).value
            except ValueError:
                raise CafeError(f"unknown user type {value!r}") from None
        # column comes from PROFILE_FIELDS only
        result = self.db.execute(
            f"UPDATE Users SET {column} = :value WHERE login = :target",
            {"value": value, "target": target},
        )
        if not result.rowcount:
            raise CafeError(f"no user with login {target!r}")
        log.info("%r set %s of %r", login, column, target)
        cprint("success!", "green")
        if target == login and column == "login":
            return value
        return login

    def update_profile(self, login: str) -> str:
        """interactive profile update; returns the session login (which may have changed)"""
        target = login
        fields = dict(PROFILE_FIELDS)
        if self.has_role(login, Role.MANAGER):
            print_options("===== manager's view =====", {1: "self", 2: "other user"})
            who = read_choice(self.read)
            if who not in (1, 2):
                cprint("unrecognized choice!", "red")
                return login
            if who == 2:
                target = self.read(colored("enter the user's login: ", "magenta"))
                if not self.user_exists(target):
                    raise CafeError(f"no user with login {target!r}")
        else:
            fields = {k: v for k, v in fields.items() if v[1] not in MANAGER_ONLY_FIELDS}

        print_options("please choose what you wish to update", {k: v[0] for k, v in fields.items()})
        choice = read_choice(self.read)
        if choice not in fields:
            cprint("unrecognized choice!", "red")
            return login
        label, column = fields[choice]
        value = self.read(colored(f"enter the new {label}: ", "magenta"))
        return self.set_field(login, target, column, value)
