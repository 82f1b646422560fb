from string import hexdigits

from web3 import Web3

# MAX type values
MAX_UINT256 = 2**256 - 1

ZERO_ADDR_PACKED = "0000000000000000000000000000000000000000"
ZERO_ADDR = "0x" + ZERO_ADDR_PACKED

E_18 = 10**18

# Time in seconds
HOUR = 60 * 60
DAY = HOUR * 24
MONTH = 30 * DAY
YEAR = 365 * DAY


def checkUInt256(number):
    assert type(number) == int, "Not an integer"
    assert number >= 0 and number <= MAX_UINT256, "OF or UF of UINT256"


def checkBool(input):
    assert type(input) == bool, "Not a bool"


def checkAddress(input):
    assert type(input) == str and Web3.is_checksum_address(input), "Not an address"


def checkBytes32(input):
    assert (
        type(input) == str and input[:2] == "0x" and len(input) == 66
    ), "Not a bytes32"
    assert all(c in hexdigits for c in input[2:]), "Not a bytes32"


# General checkInput function for all functions that take input parameters
def checkInputTypes(**kwargs):
    if "address" in kwargs:
        loopChecking(kwargs.get("address"), checkAddress)
    if "uint256" in kwargs:
        loopChecking(kwargs.get("uint256"), checkUInt256)
    if "bool" in kwargs:
        loopChecking(kwargs.get("bool"), checkBool)
    if "bytes32" in kwargs:
        loopChecking(kwargs.get("bytes32"), checkBytes32)


def loopChecking(tuple, fcn):
    # Strings are iterable but must be checked as a single value
    if isinstance(tuple, (str, bytes)):
        fcn(tuple)
        return
    try:
        iter(tuple)
    except TypeError:
        # Not iterable
        fcn(tuple)
    else:
        # Iterable
        for item in tuple:
            fcn(item)


def toChecksum(address):
    return Web3.to_checksum_address(address)


def isZeroAddress(address):
    return int(address, 16) == 0


def cleanHexStr(thing):
    if isinstance(thing, int):
        thing = hex(thing)
    elif not isinstance(thing, str):
        thing = thing.hex()
    return thing[2:] if thing[:2] == "0x" else thing


# Truncates like Solidity's (a * b) / c with uint256 operands
def mulDiv(a, b, c):
    result = (a * b) // c
    checkUInt256(result)
    return result
