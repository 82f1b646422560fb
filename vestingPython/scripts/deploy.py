import csv
import logging
import os
import os.path
from datetime import datetime

from web3 import Web3

from vestingPython.contracts.Chain import Chain
from vestingPython.contracts.Token import INIT_TOKEN_SUPPLY, TestToken
from vestingPython.contracts.TokenVesting import TokenVesting
from vestingPython.utilities import DAY, E_18, toChecksum

VESTING_FUNDING = 1000 * E_18

# Vesting info file should be formatted as a list of schedules. The first line holds the column names,
# which must match the list below (extra columns after these are ignored).
columns = [
    "Beneficiary Wallet Address",
    "# tokens",
    "Start timestamp",
    "Cliff (days)",
    "Duration (days)",
    "Revocable?",
]


def printAndLog(text):
    print(text)
    logging.info(text)


# NOTE: The default values of the environment variables are the ones used in testing. Passing
# an empty environment deploys the same setup the test suite runs against.
def deploy_vesting_contracts(chain, deployer, environment=None):
    if environment is None:
        environment = {}

    class Context:
        pass

    cf = Context()

    cf.initialSupply = int(environment.get("INITIAL_SUPPLY") or INIT_TOKEN_SUPPLY)
    cf.funding = int(environment.get("VESTING_FUNDING") or VESTING_FUNDING)
    assert (
        cf.funding <= cf.initialSupply
    ), "Not enough tokens to fund the vesting contract"

    cf.token = chain.deploy(TestToken, cf.initialSupply, sender=deployer)
    printAndLog(f"TestToken deployed to: {cf.token.address}")

    cf.tokenVesting = chain.deploy(TokenVesting, cf.token.address, sender=deployer)
    printAndLog(f"TokenVesting deployed to: {cf.tokenVesting.address}")

    cf.token.transfer(cf.tokenVesting.address, cf.funding, sender=deployer)
    printAndLog(f"TokenVesting funded with {cf.funding // E_18:,} {cf.token.symbol()}")

    assert cf.token.balanceOf(cf.tokenVesting.address) == cf.funding
    assert cf.tokenVesting.getToken() == cf.token.address
    assert cf.tokenVesting.owner() == deployer

    return cf


def read_vesting_info(path):
    vesting_list = []
    with open(path, newline="") as csvfile:
        reader = csv.reader(csvfile, delimiter=",", quotechar='"')

        # Check the first row - parameter names
        first_row = next(reader)
        for position, parameter_name in enumerate(columns):
            assert (
                first_row[position] == parameter_name
            ), f"Incorrect parameter name: expected {parameter_name}, but got {first_row[position]}"

        for row in reader:
            assert len(row) >= len(
                columns
            ), f"Incorrect number of parameters: expected {len(columns)}, but got {len(row)}"

            beneficiary = row[columns.index("Beneficiary Wallet Address")]
            if beneficiary == "":
                printAndLog(f"Skipping row with no beneficiary {row}")
                continue

            assert Web3.is_address(
                beneficiary
            ), f"Incorrect beneficiary address {beneficiary}, {row}"

            revocable = row[columns.index("Revocable?")]
            if revocable in ["yes", "Yes"]:
                revocable = True
            elif revocable in ["no", "No", ""]:
                # For undetermined default to not revocable
                revocable = False
            else:
                raise Exception(f"Incorrect revocability parameter {revocable}")

            amount = int(row[columns.index("# tokens")].replace(",", ""))

            vesting_list.append(
                [
                    toChecksum(beneficiary),
                    amount * E_18,
                    int(row[columns.index("Start timestamp")]),
                    int(row[columns.index("Cliff (days)")]) * DAY,
                    int(row[columns.index("Duration (days)")]) * DAY,
                    revocable,
                ]
            )

    return vesting_list


def create_vesting_schedules(cf, deployer, vesting_list):
    total_E18 = sum(vesting[1] for vesting in vesting_list)
    printAndLog(f"Amount of tokens required = {total_E18 // E_18:,}")
    assert (
        total_E18 <= cf.tokenVesting.getWithdrawableAmount()
    ), "Not enough tokens in the vesting contract to create the schedules"

    deployed = []
    for vesting in vesting_list:
        (
            beneficiary,
            amount_E18,
            start,
            cliffDuration,
            vestingDuration,
            revocable,
        ) = vesting

        tx = cf.tokenVesting.createVestingSchedule(
            beneficiary,
            start,
            cliffDuration,
            vestingDuration,
            amount_E18,
            revocable,
            sender=deployer,
        )
        scheduleId = tx.returnValue
        assert scheduleId == cf.tokenVesting.computeVestingScheduleId(
            beneficiary, start
        )
        deployed.append([*vesting, scheduleId])

    print("Verifying correct creation of vesting schedules...")
    for vesting in deployed:
        (
            beneficiary,
            amount_E18,
            start,
            cliffDuration,
            vestingDuration,
            revocable,
            scheduleId,
        ) = vesting
        schedule = cf.tokenVesting.getVestingSchedule(scheduleId)
        assert schedule.beneficiary == beneficiary, "Beneficiary not set correctly"
        assert schedule.totalAmount == amount_E18, "Amount not set correctly"
        assert schedule.startTime == start, "Start not set correctly"
        assert schedule.cliffDuration == cliffDuration, "Cliff not set correctly"
        assert (
            schedule.vestingDuration == vestingDuration
        ), "Duration not set correctly"
        assert schedule.revocable == revocable, "Revocability not set correctly"
        printAndLog(
            f"- Schedule {scheduleId} for {beneficiary}, amount {amount_E18 // E_18:>8}, starting {datetime.fromtimestamp(start)}, revocable {str(revocable):<5}"
        )

    return deployed


def store_deployment_info(path, cf, deployed):
    printAndLog(f"Storing deployment info in {path}")
    with open(path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(["TestToken", cf.token.address])
        writer.writerow(["TokenVesting", cf.tokenVesting.address])
        writer.writerows(deployed)


def main(environment=None):
    if environment is None:
        environment = os.environ

    logging.basicConfig(
        filename=environment.get("LOG_FILE") or "deploy.log", level=logging.INFO
    )
    logging.info(
        "=========================   Running deploy.py script  =========================="
    )

    genesis = environment.get("GENESIS_TIMESTAMP")
    chain = Chain(int(genesis) if genesis else None)
    DEPLOYER_ACCOUNT_INDEX = int(environment.get("DEPLOYER_ACCOUNT_INDEX") or 0)
    DEPLOYER = chain.accounts[DEPLOYER_ACCOUNT_INDEX]
    print(f"DEPLOYER = {DEPLOYER}")
    print(f"Current date = {datetime.fromtimestamp(chain.time())} ({chain.time()})")

    cf = deploy_vesting_contracts(chain, DEPLOYER, environment)

    deployed = []
    vesting_info_file = environment.get("VESTING_INFO_FILE")
    if vesting_info_file:
        vesting_list = read_vesting_info(vesting_info_file)
        printAndLog(f"Number of vesting schedules = {len(vesting_list)}")
        deployed = create_vesting_schedules(cf, DEPLOYER, vesting_list)

    deployment_info_file = environment.get("DEPLOYMENT_INFO_FILE")
    if deployment_info_file:
        assert not os.path.isfile(
            deployment_info_file
        ), f"Deployment info file {deployment_info_file} already exists"
        store_deployment_info(deployment_info_file, cf, deployed)

    printAndLog(
        f"Withdrawable amount left in TokenVesting = {cf.tokenVesting.getWithdrawableAmount() // E_18:,}"
    )
    return chain, cf


if __name__ == "__main__":
    main()
