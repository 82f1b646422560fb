from vestingPython.utilities import checkInputTypes, mulDiv

### @title VestingMath
### @notice Linear vesting with a cliff. Nothing vests before start + cliff, the whole amount is vested
### at start + duration and in between it vests linearly over (duration - cliff).


### @notice Computes the amount vested at a given timestamp
### @param totalAmount Total amount of the schedule
### @param start Start of the vesting period
### @param cliff Duration of the cliff, relative to start
### @param duration Duration of the vesting period, relative to start
### @param timestamp Time at which the vested amount is computed
### @return vestedAmount Rounded down
def computeVestedAmount(totalAmount, start, cliff, duration, timestamp):
    checkInputTypes(uint256=(totalAmount, start, cliff, duration, timestamp))
    assert cliff <= duration

    if timestamp < start + cliff:
        return 0
    # Covers cliff == duration, where the linear part is empty
    if timestamp >= start + duration:
        return totalAmount

    vestedSeconds = timestamp - start - cliff
    return mulDiv(totalAmount, vestedSeconds, duration - cliff)


def computeReleasableAmount(totalAmount, start, cliff, duration, timestamp, released):
    vestedAmount = computeVestedAmount(totalAmount, start, cliff, duration, timestamp)
    # Health check
    assert released <= vestedAmount
    return vestedAmount - released
