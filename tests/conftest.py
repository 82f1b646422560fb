import pytest
from consts import *
from vestingPython.contracts.Chain import Chain
from vestingPython.scripts.deploy import deploy_vesting_contracts


# A fresh chain per test gives test isolation
@pytest.fixture
def chain():
    return Chain(GENESIS_TIMESTAMP)


@pytest.fixture
def a(chain):
    return chain.accounts


@pytest.fixture
def addrs(a):
    class Context:
        pass

    # It's a bit easier to not get mixed up with accounts if they're named
    addrs = Context()
    addrs.DEPLOYER = a[0]
    addrs.BENEFICIARY = a[1]
    addrs.INVESTOR = a[2]
    addrs.OWNER_2 = a[3]
    addrs.NOBODY = a[9]
    return addrs


# Deploy the token and the vesting contract and fund it, same as the deployment script
@pytest.fixture
def cf(chain, addrs):
    cf = deploy_vesting_contracts(chain, addrs.DEPLOYER)
    chain.snapshot()
    return cf


# Revocable schedule starting now with a one month cliff and a six month duration. A snapshot is
# taken so tests using hypothesis can chain.revert() to this state on every example.
@pytest.fixture
def tokenVesting(chain, addrs, cf):
    tv = cf.tokenVesting
    start = chain.time()

    tx = tv.createVestingSchedule(
        addrs.BENEFICIARY, start, CLIFF, DURATION, TEST_AMNT, True, sender=addrs.DEPLOYER
    )
    scheduleId = tx.returnValue

    chain.snapshot()
    return tv, scheduleId, start, CLIFF, DURATION, TEST_AMNT


@pytest.fixture
def tokenVestingNonRevocable(chain, addrs, cf):
    tv = cf.tokenVesting
    start = chain.time()

    tx = tv.createVestingSchedule(
        addrs.INVESTOR, start, CLIFF, DURATION, TEST_AMNT, False, sender=addrs.DEPLOYER
    )
    return tv, tx.returnValue, start, CLIFF, DURATION, TEST_AMNT
