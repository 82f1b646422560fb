from vestingPython.contracts.Contract import Contract, transaction
from vestingPython.contracts.Errors import *
from vestingPython.utilities import (
    MAX_UINT256,
    ZERO_ADDR,
    checkInputTypes,
    isZeroAddress,
)

INIT_TOKEN_SUPPLY = 10**6 * 10**18


### @title TestToken
### @notice Standard ERC20 ledger, the funding source and payout sink of the vesting contract.
### Balances are only kept for addresses that have held tokens.
class TestToken(Contract):
    def __init__(self, initialSupply=INIT_TOKEN_SUPPLY, *, sender):
        checkInputTypes(uint256=(initialSupply))

        self._name = "TestToken"
        self._symbol = "TST"
        self._totalSupply = 0
        self.balances = dict()
        self.allowances = dict()

        self._mint(sender, initialSupply)

    def name(self):
        return self._name

    def symbol(self):
        return self._symbol

    def decimals(self):
        return 18

    def totalSupply(self):
        return self._totalSupply

    def balanceOf(self, account):
        checkInputTypes(address=(account))
        return self.balances.get(account, 0)

    def allowance(self, owner, spender):
        checkInputTypes(address=(owner, spender))
        return self.allowances.get((owner, spender), 0)

    @transaction
    def transfer(self, recipient, amount, *, sender):
        checkInputTypes(address=(recipient), uint256=(amount))
        self._transfer(sender, recipient, amount)
        return True

    @transaction
    def approve(self, spender, amount, *, sender):
        checkInputTypes(address=(spender), uint256=(amount))
        require(not isZeroAddress(spender), InvalidInput, REV_MSG_ERC20_APPROVE_ZERO)

        self.allowances[(sender, spender)] = amount
        self.emit("Approval", owner=sender, spender=spender, value=amount)
        return True

    @transaction
    def transferFrom(self, owner, recipient, amount, *, sender):
        checkInputTypes(address=(owner, recipient), uint256=(amount))

        currentAllowance = self.allowance(owner, sender)
        # Infinite approvals are not consumed
        if currentAllowance != MAX_UINT256:
            require(
                currentAllowance >= amount,
                InsufficientFunds,
                REV_MSG_ERC20_INSUF_ALLOWANCE,
            )
            self.allowances[(owner, sender)] = currentAllowance - amount

        self._transfer(owner, recipient, amount)
        return True

    def _transfer(self, owner, recipient, amount):
        require(
            not isZeroAddress(recipient), InvalidInput, REV_MSG_ERC20_TRANSFER_ZERO
        )

        balanceSenderBefore = self.balanceOf(owner)
        balanceReceiverBefore = self.balanceOf(recipient)

        require(
            balanceSenderBefore >= amount, InsufficientFunds, REV_MSG_ERC20_EXCEED_BAL
        )

        self._updateBalance(owner, -amount)
        self._updateBalance(recipient, amount)

        # Transfer health check
        if owner != recipient:
            assert self.balanceOf(owner) == balanceSenderBefore - amount
            assert self.balanceOf(recipient) == balanceReceiverBefore + amount

        self.emit("Transfer", sender=owner, receiver=recipient, value=amount)

    def _mint(self, account, amount):
        require(not isZeroAddress(account), InvalidInput, REV_MSG_NZ_ADDR)
        self._totalSupply += amount
        require(self._totalSupply <= MAX_UINT256, Overflow, REV_MSG_OVERFLOW)
        self._updateBalance(account, amount)
        self.emit("Transfer", sender=ZERO_ADDR, receiver=account, value=amount)

    def _updateBalance(self, account, amount):
        newBalance = self.balances.get(account, 0) + amount

        # Check potential overflow/underflow that would happen in solidity
        require(0 <= newBalance <= MAX_UINT256, Overflow, REV_MSG_OVERFLOW)
        self.balances[account] = newBalance
