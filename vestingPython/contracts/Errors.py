### @title Errors
### @notice Reverts raised by the contract models. Subclassing AssertionError keeps a
### typed revert and a failed input check interchangeable for the transaction rollback
### and for the tests, which only compare the revert string.

REV_MSG_NZ_ADDR = "Shared: address input is empty"
REV_MSG_NZ_UINT = "Shared: uint input is empty"
REV_MSG_OVERFLOW = "Integer overflow"
REV_MSG_REENTRANT = "ReentrancyGuard: reentrant call"

# -----Ownable-----
REV_MSG_NOT_OWNER = "Ownable: caller is not the owner"

# -----ERC20-----
REV_MSG_ERC20_EXCEED_BAL = "ERC20: transfer amount exceeds balance"
REV_MSG_ERC20_INSUF_ALLOWANCE = "ERC20: insufficient allowance"
REV_MSG_ERC20_TRANSFER_ZERO = "ERC20: transfer to the zero address"
REV_MSG_ERC20_APPROVE_ZERO = "ERC20: approve to the zero address"

# -----TokenVesting-----
REV_MSG_INVALID_DURATION = "TokenVesting: duration must be > 0"
REV_MSG_CLIFF_AFTER_DURATION = "TokenVesting: cliff is longer than duration"
REV_MSG_ALREADY_INITIALIZED = "TokenVesting: vesting schedule already initialized"
REV_MSG_NOT_INITIALIZED = "TokenVesting: vesting schedule not initialized"
REV_MSG_INSUFFICIENT_TOKENS = "TokenVesting: cannot create vesting schedule because not sufficient tokens"
REV_MSG_NOT_BENEFICIARY_OR_OWNER = "TokenVesting: only beneficiary and owner can release vested tokens"
REV_MSG_NO_TOKENS = "TokenVesting: no tokens are due"
REV_MSG_RELEASE_EXCEEDS = "TokenVesting: cannot release tokens, not enough vested tokens"
REV_MSG_NOT_REVOCABLE = "TokenVesting: vesting is not revocable"
REV_MSG_ALREADY_REVOKED = "TokenVesting: vesting schedule already revoked"
REV_MSG_NOT_ENOUGH_WITHDRAWABLE = "TokenVesting: not enough withdrawable funds"
REV_MSG_INDEX_OUT_OF_BOUNDS = "TokenVesting: index out of bounds"


class Revert(AssertionError):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


# Zero amounts, zero addresses and inconsistent durations
class InvalidInput(Revert):
    pass


class AlreadyInitialized(Revert):
    pass


class NotInitialized(Revert):
    pass


class Unauthorized(Revert):
    pass


class InsufficientVested(Revert):
    pass


class InsufficientFunds(Revert):
    pass


class NotRevocable(Revert):
    pass


class AlreadyRevoked(Revert):
    pass


class Reentrancy(Revert):
    pass


class Overflow(Revert):
    pass


def require(condition, error, message):
    if not condition:
        raise error(message)
