import copy
from dataclasses import dataclass, field
from datetime import datetime

from web3 import Web3

from vestingPython.contracts.Contract import Contract
from vestingPython.utilities import checkInputTypes, checkUInt256, toChecksum

NUMBER_OF_ACCOUNTS = 10


class EventDict(dict):
    # Events are keyed by name, each holding the list of emitted values in emission order
    def add(self, name, values):
        self.setdefault(name, []).append(values)

    def count(self, name):
        return len(self.get(name, []))


@dataclass
class TransactionReceipt:
    fnName: str
    sender: str
    timestamp: int
    blockNumber: int
    events: EventDict = field(default_factory=EventDict)
    returnValue: object = None


### @title Chain
### @notice Minimal in-memory chain the contract models run on. It keeps the block timestamps, the
### deployed contracts and the account nonces, and executes every transaction atomically: a revert, or any other
### exception raised by the transaction, restores every contract to its state before the transaction.
class Chain:
    def __init__(self, genesisTimestamp=None):
        if genesisTimestamp is None:
            genesisTimestamp = int(datetime.now().timestamp())
        checkUInt256(genesisTimestamp)

        self._blocks = [genesisTimestamp]
        # Timestamp the next transaction/block will have
        self._time = genesisTimestamp
        self.contracts = dict()
        self.nonces = dict()
        self._pending = None
        self._snapshot = None

        self.accounts = [
            toChecksum(Web3.to_hex(Web3.keccak(text=f"account{i}")[-20:]))
            for i in range(NUMBER_OF_ACCOUNTS)
        ]

    ### TIME ###

    def time(self):
        return self._time

    def latest(self):
        return self._blocks[-1]

    @property
    def height(self):
        return len(self._blocks) - 1

    def sleep(self, seconds):
        checkUInt256(seconds)
        self._time += seconds

    def mine(self, blocks=1, timestamp=None):
        checkUInt256(blocks)
        if timestamp is not None:
            checkUInt256(timestamp)
            assert timestamp >= self._time, "Timestamp in the past"
            self._time = timestamp
        for _ in range(blocks):
            self._blocks.append(self._time)
        return self.height

    # Same as hardhat's time.increase, advance the time and mine a block with it
    def increase(self, seconds):
        self.sleep(seconds)
        return self.mine()

    ### DEPLOYMENT ###

    def deploy(self, ContractClass, *args, sender):
        checkInputTypes(address=sender)
        address = self._contractAddress(sender, self.nonces.get(sender, 0))

        def construct():
            contract = ContractClass.__new__(ContractClass)
            Contract.bind(contract, self, address)
            self.contracts[address] = contract
            contract.__init__(*args, sender=sender)
            return contract

        return self.execute("constructor", sender, construct).returnValue

    def at(self, address):
        assert address in self.contracts, "No contract deployed at " + address
        return self.contracts[address]

    # Not the real CREATE address (that needs the RLP encoding) but deterministic on the same inputs
    @staticmethod
    def _contractAddress(deployer, nonce):
        digest = Web3.solidity_keccak(["address", "uint256"], [deployer, nonce])
        return toChecksum(Web3.to_hex(digest[-20:]))

    ### TRANSACTIONS ###

    def execute(self, fnName, sender, call):
        # Internal call within an ongoing transaction
        if self._pending is not None:
            return call()

        state = self._saveState()
        self._pending = TransactionReceipt(
            fnName, sender, self._time, self.height + 1, EventDict()
        )
        try:
            returnValue = call()
        except Exception:
            self._restoreState(state)
            raise
        finally:
            receipt, self._pending = self._pending, None

        receipt.returnValue = returnValue
        self.nonces[sender] = self.nonces.get(sender, 0) + 1
        self.mine()
        return receipt

    def emit(self, contract, name, values):
        assert self._pending is not None, "Events can only be emitted in a transaction"
        self._pending.events.add(name, values)

    ### SNAPSHOTS ###

    # Mimics brownie's chain.snapshot()/chain.revert(). The snapshot can be reverted to several times.
    def snapshot(self):
        self._snapshot = (
            self._saveState(),
            list(self._blocks),
            self._time,
            dict(self.nonces),
        )
        return self.height

    def revert(self):
        assert self._snapshot is not None, "No snapshot to revert to"
        state, blocks, timestamp, nonces = self._snapshot
        self._restoreState(state)
        self._blocks = list(blocks)
        self._time = timestamp
        self.nonces = dict(nonces)
        return self.height

    # Contracts reference each other and the chain, those references must survive the copy.
    def _memo(self):
        memo = {id(self): self}
        for contract in self.contracts.values():
            memo[id(contract)] = contract
        return memo

    def _saveState(self):
        storage = {
            address: copy.deepcopy(contract.__dict__, self._memo())
            for address, contract in self.contracts.items()
        }
        return dict(self.contracts), storage

    def _restoreState(self, state):
        contracts, storage = state
        self.contracts = dict(contracts)
        for address, contract in self.contracts.items():
            contract.__dict__.clear()
            contract.__dict__.update(copy.deepcopy(storage[address], self._memo()))
