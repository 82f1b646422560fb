import functools

from vestingPython.contracts.Errors import Reentrancy, REV_MSG_REENTRANT, require
from vestingPython.utilities import checkInputTypes


### @title Contract
### @notice Base class of the contract models. A contract is created through Chain.deploy, which binds
### the chain and the contract address before running the subclass constructor. Any state a subclass
### stores in its attributes is snapshotted and rolled back by the chain around every transaction.
class Contract:
    def bind(self, chain, address):
        self.chain = chain
        self.address = address
        # ReentrancyGuard status
        self._entered = False

    def emit(self, name, **values):
        self.chain.emit(self, name, values)

    def __repr__(self):
        return f"<{type(self).__name__} '{self.address}'>"


# @dev Mutating entry point. Mimics an external call: the caller passes msg.sender as `sender` and
# gets back a TransactionReceipt. Calls made from inside another transaction (e.g. the vesting
# contract calling the token) join the outer transaction and return the plain return value.
def transaction(fcn):
    @functools.wraps(fcn)
    def wrapper(self, *args, sender, **kwargs):
        checkInputTypes(address=sender)
        return self.chain.execute(
            fcn.__name__, sender, lambda: fcn(self, *args, sender=sender, **kwargs)
        )

    return wrapper


# @dev Same as OpenZeppelin's ReentrancyGuard. Must be applied below @transaction.
def nonReentrant(fcn):
    @functools.wraps(fcn)
    def wrapper(self, *args, **kwargs):
        require(not self._entered, Reentrancy, REV_MSG_REENTRANT)
        self._entered = True
        try:
            return fcn(self, *args, **kwargs)
        finally:
            self._entered = False

    return wrapper
