import copy
from dataclasses import dataclass

from web3 import Web3

from vestingPython.contracts.Contract import Contract, nonReentrant, transaction
from vestingPython.contracts.Errors import *
import vestingPython.contracts.VestingMath as VestingMath
from vestingPython.utilities import checkInputTypes, isZeroAddress


@dataclass
class VestingSchedule:
    initialized: bool
    ## beneficiary of tokens after they are released
    beneficiary: str
    ## start time of the vesting period
    startTime: int
    ## cliff period in seconds, relative to startTime
    cliffDuration: int
    ## duration of the vesting period in seconds, relative to startTime
    vestingDuration: int
    ## total amount of tokens to be released at the end of the vesting
    totalAmount: int
    ## whether or not the vesting is revocable
    revocable: bool
    ## amount of tokens released
    releasedAmount: int
    ## whether or not the vesting has been revoked
    revoked: bool
    ## timestamp at which vesting stopped accruing, zero if not revoked
    revokedTime: int = 0


UNINITIALIZED_SCHEDULE = VestingSchedule(False, "", 0, 0, 0, 0, False, 0, False, 0)


### @title TokenVesting
### @notice Holds the tokens of any number of vesting schedules, each one addressed by an id derived
### from its beneficiary and start time. The owner funds the contract through the token, creates and
### revokes schedules and withdraws tokens not committed to any schedule. The beneficiary (or the
### owner) releases vested tokens.
### @dev Tokens committed to the schedules (vestingSchedulesTotalAmount) never exceed the contract's
### token balance. Every transfer out happens after the contract's state has been updated.
class TokenVesting(Contract):
    def __init__(self, token, *, sender):
        checkInputTypes(address=(token))
        require(not isZeroAddress(token), InvalidInput, REV_MSG_NZ_ADDR)

        self.token = self.chain.at(token)
        self._owner = sender

        self.vestingSchedules = dict()
        self.vestingSchedulesIds = []
        self.vestingSchedulesTotalAmount = 0
        self.holdersVestingCount = dict()

    ### OWNABLE ###

    def owner(self):
        return self._owner

    def _onlyOwner(self, sender):
        require(sender == self._owner, Unauthorized, REV_MSG_NOT_OWNER)

    @transaction
    def transferOwnership(self, newOwner, *, sender):
        checkInputTypes(address=(newOwner))
        self._onlyOwner(sender)
        require(not isZeroAddress(newOwner), InvalidInput, REV_MSG_NZ_ADDR)

        previousOwner = self._owner
        self._owner = newOwner
        self.emit(
            "OwnershipTransferred", previousOwner=previousOwner, newOwner=newOwner
        )

    ### SCHEDULES ###

    ### @notice Computes the vesting schedule identifier for a beneficiary and a start time
    ### @return keccak256(abi.encodePacked(beneficiary, startTime)) as a 0x-prefixed hex string
    @staticmethod
    def computeVestingScheduleId(beneficiary, startTime):
        checkInputTypes(address=(beneficiary), uint256=(startTime))
        return Web3.to_hex(
            Web3.solidity_keccak(["address", "uint256"], [beneficiary, startTime])
        )

    ### @notice Creates a new vesting schedule for a beneficiary
    ### @param beneficiary Address of the beneficiary to whom vested tokens are transferred
    ### @param startTime Start time of the vesting period
    ### @param cliffDuration Duration in seconds of the cliff in which tokens will begin to vest
    ### @param vestingDuration Duration in seconds of the period in which the tokens will vest
    ### @param totalAmount Total amount of tokens to be released at the end of the vesting
    ### @param revocable Whether the vesting is revocable or not
    @transaction
    def createVestingSchedule(
        self,
        beneficiary,
        startTime,
        cliffDuration,
        vestingDuration,
        totalAmount,
        revocable,
        *,
        sender,
    ):
        checkInputTypes(
            address=(beneficiary),
            uint256=(startTime, cliffDuration, vestingDuration, totalAmount),
            bool=(revocable),
        )
        self._onlyOwner(sender)

        require(not isZeroAddress(beneficiary), InvalidInput, REV_MSG_NZ_ADDR)
        require(totalAmount > 0, InvalidInput, REV_MSG_NZ_UINT)
        require(vestingDuration > 0, InvalidInput, REV_MSG_INVALID_DURATION)
        require(
            vestingDuration >= cliffDuration,
            InvalidInput,
            REV_MSG_CLIFF_AFTER_DURATION,
        )

        scheduleId = self.computeVestingScheduleId(beneficiary, startTime)
        require(
            not self._getSchedule(scheduleId).initialized,
            AlreadyInitialized,
            REV_MSG_ALREADY_INITIALIZED,
        )
        require(
            self.getWithdrawableAmount() >= totalAmount,
            InsufficientFunds,
            REV_MSG_INSUFFICIENT_TOKENS,
        )

        self.vestingSchedules[scheduleId] = VestingSchedule(
            initialized=True,
            beneficiary=beneficiary,
            startTime=startTime,
            cliffDuration=cliffDuration,
            vestingDuration=vestingDuration,
            totalAmount=totalAmount,
            revocable=revocable,
            releasedAmount=0,
            revoked=False,
        )
        self.vestingSchedulesTotalAmount += totalAmount
        self.vestingSchedulesIds.append(scheduleId)
        self.holdersVestingCount[beneficiary] = (
            self.holdersVestingCount.get(beneficiary, 0) + 1
        )

        self.emit(
            "VestingScheduleCreated",
            scheduleId=scheduleId,
            beneficiary=beneficiary,
            totalAmount=totalAmount,
        )
        return scheduleId

    ### @notice Release vested tokens to the beneficiary
    ### @param scheduleId The vesting schedule identifier
    ### @param amount Amount to release, all the releasable amount if not specified
    @transaction
    @nonReentrant
    def release(self, scheduleId, amount=None, *, sender):
        checkInputTypes(bytes32=(scheduleId))
        scheduleId = scheduleId.lower()
        if amount is not None:
            checkInputTypes(uint256=(amount))
            require(amount > 0, InvalidInput, REV_MSG_NZ_UINT)

        vestingSchedule = self._onlyIfInitialized(scheduleId)
        require(
            sender == vestingSchedule.beneficiary or sender == self._owner,
            Unauthorized,
            REV_MSG_NOT_BENEFICIARY_OR_OWNER,
        )

        releasable = self._computeReleasableAmount(vestingSchedule)
        require(releasable > 0, InsufficientVested, REV_MSG_NO_TOKENS)
        if amount is None:
            amount = releasable
        require(amount <= releasable, InsufficientVested, REV_MSG_RELEASE_EXCEEDS)

        vestingSchedule.releasedAmount += amount
        self.vestingSchedulesTotalAmount -= amount
        # Health check
        assert vestingSchedule.releasedAmount <= vestingSchedule.totalAmount

        self.token.transfer(vestingSchedule.beneficiary, amount, sender=self.address)

        self.emit(
            "TokensReleased",
            scheduleId=scheduleId,
            beneficiary=vestingSchedule.beneficiary,
            amount=amount,
        )
        return amount

    ### @notice Revokes a vesting schedule. Tokens vested so far remain releasable by the beneficiary,
    ### the tokens that had not vested yet are returned to the owner.
    ### @param scheduleId The vesting schedule identifier
    @transaction
    @nonReentrant
    def revoke(self, scheduleId, *, sender):
        checkInputTypes(bytes32=(scheduleId))
        scheduleId = scheduleId.lower()
        self._onlyOwner(sender)

        vestingSchedule = self._onlyIfInitialized(scheduleId)
        require(vestingSchedule.revocable, NotRevocable, REV_MSG_NOT_REVOCABLE)
        require(not vestingSchedule.revoked, AlreadyRevoked, REV_MSG_ALREADY_REVOKED)

        vestedAmount = self._computeVestedAmount(vestingSchedule)
        unvestedAmount = vestingSchedule.totalAmount - vestedAmount

        vestingSchedule.revoked = True
        vestingSchedule.revokedTime = self.chain.time()
        self.vestingSchedulesTotalAmount -= unvestedAmount

        if unvestedAmount > 0:
            self.token.transfer(self._owner, unvestedAmount, sender=self.address)

        self.emit(
            "VestingScheduleRevoked",
            scheduleId=scheduleId,
            unvestedAmount=unvestedAmount,
        )
        return unvestedAmount

    ### @notice Withdraw tokens that are not committed to any vesting schedule
    @transaction
    @nonReentrant
    def withdraw(self, amount, *, sender):
        checkInputTypes(uint256=(amount))
        self._onlyOwner(sender)
        require(amount > 0, InvalidInput, REV_MSG_NZ_UINT)
        require(
            self.getWithdrawableAmount() >= amount,
            InsufficientFunds,
            REV_MSG_NOT_ENOUGH_WITHDRAWABLE,
        )

        self.token.transfer(self._owner, amount, sender=self.address)
        self.emit("Withdrawn", recipient=self._owner, amount=amount)

    ### VIEWS ###

    def getToken(self):
        return self.token.address

    ### @return A copy of the vesting schedule, so callers can't modify the contract's storage
    def getVestingSchedule(self, scheduleId):
        checkInputTypes(bytes32=(scheduleId))
        return copy.copy(self._onlyIfInitialized(scheduleId))

    def computeVestedAmount(self, scheduleId):
        checkInputTypes(bytes32=(scheduleId))
        return self._computeVestedAmount(self._onlyIfInitialized(scheduleId))

    def computeReleasableAmount(self, scheduleId):
        checkInputTypes(bytes32=(scheduleId))
        return self._computeReleasableAmount(self._onlyIfInitialized(scheduleId))

    def getVestingSchedulesTotalAmount(self):
        return self.vestingSchedulesTotalAmount

    def getWithdrawableAmount(self):
        return self.token.balanceOf(self.address) - self.vestingSchedulesTotalAmount

    def getVestingSchedulesCount(self):
        return len(self.vestingSchedulesIds)

    def getVestingIdAtIndex(self, index):
        checkInputTypes(uint256=(index))
        require(
            index < self.getVestingSchedulesCount(),
            InvalidInput,
            REV_MSG_INDEX_OUT_OF_BOUNDS,
        )
        return self.vestingSchedulesIds[index]

    def getVestingSchedulesCountByBeneficiary(self, beneficiary):
        checkInputTypes(address=(beneficiary))
        return self.holdersVestingCount.get(beneficiary, 0)

    ### INTERNAL ###

    # Need to handle non-existing schedules in Python, without inserting them in the mapping.
    # Ids are stored as lowercase hex strings, bytes32 inputs may come in any case.
    def _getSchedule(self, scheduleId):
        return self.vestingSchedules.get(scheduleId.lower(), UNINITIALIZED_SCHEDULE)

    def _onlyIfInitialized(self, scheduleId):
        vestingSchedule = self._getSchedule(scheduleId)
        require(vestingSchedule.initialized, NotInitialized, REV_MSG_NOT_INITIALIZED)
        return vestingSchedule

    # Once revoked, vesting is frozen at the revocation time
    def _vestingTime(self, vestingSchedule):
        if vestingSchedule.revoked:
            return min(self.chain.time(), vestingSchedule.revokedTime)
        return self.chain.time()

    def _computeVestedAmount(self, vestingSchedule):
        return VestingMath.computeVestedAmount(
            vestingSchedule.totalAmount,
            vestingSchedule.startTime,
            vestingSchedule.cliffDuration,
            vestingSchedule.vestingDuration,
            self._vestingTime(vestingSchedule),
        )

    def _computeReleasableAmount(self, vestingSchedule):
        return VestingMath.computeReleasableAmount(
            vestingSchedule.totalAmount,
            vestingSchedule.startTime,
            vestingSchedule.cliffDuration,
            vestingSchedule.vestingDuration,
            self._vestingTime(vestingSchedule),
            vestingSchedule.releasedAmount,
        )
