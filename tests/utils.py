from contextlib import contextmanager

import pytest


# Same as brownie's reverts. Catches both typed reverts and failed input checks (AssertionError)
# and, if given, checks the revert message.
@contextmanager
def reverts(revertMsg=None):
    with pytest.raises(AssertionError) as excinfo:
        yield excinfo
    if revertMsg is not None and str(excinfo.value) != revertMsg:
        raise AssertionError(
            "Reverted succesfully but not for the expected reason. \n Expected: '"
            + str(revertMsg)
            + "' but got: '"
            + str(excinfo.value)
            + "'"
        )


def getEvent(tx, name, index=0):
    assert name in tx.events, f"Event {name} not emitted in {tx.fnName}"
    return tx.events[name][index]
