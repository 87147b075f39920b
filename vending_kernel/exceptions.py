"""
Typed Exception Hierarchy for the Vending Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

A vending machine has two very different kinds of failure:

  - The customer did something the machine can't honour (unknown label,
    not enough credit, no exact change). The machine says so and waits
    for the next command. Nothing changes.
  - The machine's own bookkeeping is broken (two rows share a label).
    Nothing sensible can be done and the operation must stop loudly.

Callers tell these apart by TYPE, never by parsing messages:

    try:
        controller.purchase(label)
    except UserInputError as e:
        show_advisory(e.code)              # recoverable
    except ChangeUnavailableError as e:
        show_advisory(e.code)              # recoverable, credit retained
    # IntegrityViolation is deliberately NOT caught here

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from VendingKernelError:

    VendingKernelError (base)
    |
    +-- UserInputError
    |   +-- UnrecognizedLabelError
    |   +-- UnrecognizedCommandError
    |   +-- UnknownCoinError
    |   +-- InsufficientFundsError
    |
    +-- ChangeUnavailableError
    |
    +-- IntegrityViolation
        +-- DuplicateLabelError
        +-- RowNotStockedError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                  | When Raised
----------------|-----------------------|------------------------------------------
User input      | UNRECOGNIZED_LABEL    | No row is stocked under the label
                | UNRECOGNIZED_COMMAND  | Text command matches nothing
                | UNKNOWN_COIN          | Token is not one of the five coins
                | INSUFFICIENT_FUNDS    | Credit is below the item price
----------------|-----------------------|------------------------------------------
Change          | CHANGE_UNAVAILABLE    | No exact coin combination for the change
----------------|-----------------------|------------------------------------------
Integrity       | DUPLICATE_LABEL       | More than one row stored under a label
                | ROW_NOT_STOCKED       | Vend called for a row the ledger lacks

===============================================================================
DESIGN DECISIONS
===============================================================================

1. ChangeUnavailableError is NOT a UserInputError. The customer did
   nothing wrong; the machine is short of coins. The credit stays in the
   purchase buffer until the customer adds coins or asks for a refund.

2. IntegrityViolation is never converted into a result object. Every
   layer lets it propagate.

3. Programming defects (negative amounts, fractional cents) raise the
   built-in ValueError/TypeError and are not part of this hierarchy.
"""


class VendingKernelError(Exception):
    """
    Base exception for all vending kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "VENDING_KERNEL_ERROR"


# User input exceptions


class UserInputError(VendingKernelError):
    """Base exception for recoverable customer mistakes."""

    code: str = "USER_INPUT_ERROR"


class UnrecognizedLabelError(UserInputError):
    """No row is stocked under the requested label."""

    code: str = "UNRECOGNIZED_LABEL"

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Unrecognized item label: {label}")


class UnrecognizedCommandError(UserInputError):
    """Text command is neither a coin, a keyword nor a stocked label."""

    code: str = "UNRECOGNIZED_COMMAND"

    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unrecognized command: {command}")


class UnknownCoinError(UserInputError):
    """Token does not name one of the machine's coins."""

    code: str = "UNKNOWN_COIN"

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unknown coin: {token}")


class InsufficientFundsError(UserInputError):
    """Credit in the purchase buffer is below the item price."""

    code: str = "INSUFFICIENT_FUNDS"

    def __init__(self, label: str, price_cents: int, credit_cents: int):
        self.label = label
        self.price_cents = price_cents
        self.credit_cents = credit_cents
        self.required_cents = price_cents - credit_cents
        super().__init__(
            f"Need {self.required_cents} more cents to buy item in {label} "
            f"(price={price_cents}, credit={credit_cents})"
        )


# Change exceptions


class ChangeUnavailableError(VendingKernelError):
    """
    No exact combination of coins covers the requested change.

    Raised before any pool is touched, so the purchase buffer is intact.
    """

    code: str = "CHANGE_UNAVAILABLE"

    def __init__(self, amount_cents: int, available_cents: int):
        self.amount_cents = amount_cents
        self.available_cents = available_cents
        super().__init__(
            f"Cannot make change for {amount_cents} cents "
            f"from {available_cents} cents on hand"
        )


# Integrity exceptions


class IntegrityViolation(VendingKernelError):
    """
    Base exception for broken storage invariants.

    These are fatal. They indicate a defect, not a customer mistake, and
    must never be swallowed.
    """

    code: str = "INTEGRITY_VIOLATION"


class DuplicateLabelError(IntegrityViolation):
    """More than one row is stored under the same label."""

    code: str = "DUPLICATE_LABEL"

    def __init__(self, label: str, match_count: int):
        self.label = label
        self.match_count = match_count
        super().__init__(
            f"Machine is corrupt: {match_count} rows share label {label}"
        )


class RowNotStockedError(IntegrityViolation):
    """Vend was requested for a row the ledger does not hold."""

    code: str = "ROW_NOT_STOCKED"

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Row {label} is not stocked in this machine")
