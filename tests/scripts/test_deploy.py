import csv
import logging

from consts import *
from vestingPython.contracts.Chain import Chain
from vestingPython.scripts.deploy import (
    columns,
    create_vesting_schedules,
    deploy_vesting_contracts,
    main,
    read_vesting_info,
)

import pytest

BENEFICIARY_1 = "0x52908400098527886E0F7030069857D2E4169EE7"
BENEFICIARY_2 = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"


def write_vesting_info(path, rows, header=columns):
    with open(path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(header)
        writer.writerows(rows)
    return str(path)


def test_deploy_vesting_contracts(chain, addrs, caplog):
    caplog.set_level(logging.INFO)

    cf = deploy_vesting_contracts(
        chain,
        addrs.INVESTOR,
        {"INITIAL_SUPPLY": str(TEST_AMNT * 3), "VESTING_FUNDING": str(TEST_AMNT)},
    )

    assert cf.token.totalSupply() == TEST_AMNT * 3
    assert cf.token.balanceOf(cf.tokenVesting.address) == TEST_AMNT
    assert cf.token.balanceOf(addrs.INVESTOR) == TEST_AMNT * 2
    assert cf.tokenVesting.owner() == addrs.INVESTOR
    assert f"TokenVesting deployed to: {cf.tokenVesting.address}" in caplog.text


def test_deploy_vesting_contracts_rev_funding(chain, addrs):
    with reverts("Not enough tokens to fund the vesting contract"):
        deploy_vesting_contracts(
            chain, addrs.DEPLOYER, {"VESTING_FUNDING": str(INIT_TOKEN_SUPPLY + 1)}
        )


def test_read_vesting_info(tmp_path):
    path = write_vesting_info(
        tmp_path / "vesting.csv",
        [
            [BENEFICIARY_1.lower(), "1,000", GENESIS_TIMESTAMP, "30", "365", "Yes"],
            ["", "", "", "", "", ""],
            [BENEFICIARY_2, "50", GENESIS_TIMESTAMP + DAY, "0", "10", "", "extra"],
        ],
    )

    assert read_vesting_info(path) == [
        [BENEFICIARY_1, 1000 * E_18, GENESIS_TIMESTAMP, 30 * DAY, 365 * DAY, True],
        [BENEFICIARY_2, 50 * E_18, GENESIS_TIMESTAMP + DAY, 0, 10 * DAY, False],
    ]


def test_read_vesting_info_rev(tmp_path):
    row = [BENEFICIARY_1, "10", GENESIS_TIMESTAMP, "30", "365", "No"]

    header = list(columns)
    header[1] = "Amount"
    path = write_vesting_info(tmp_path / "header.csv", [row], header)
    with reverts("Incorrect parameter name: expected # tokens, but got Amount"):
        read_vesting_info(path)

    path = write_vesting_info(tmp_path / "short.csv", [row[:-1]])
    with reverts("Incorrect number of parameters: expected 6, but got 5"):
        read_vesting_info(path)

    path = write_vesting_info(tmp_path / "address.csv", [["0x1234"] + row[1:]])
    with pytest.raises(AssertionError, match="Incorrect beneficiary address"):
        read_vesting_info(path)

    path = write_vesting_info(tmp_path / "revocable.csv", [row[:-1] + ["maybe"]])
    with pytest.raises(Exception, match="Incorrect revocability parameter maybe"):
        read_vesting_info(path)


def test_create_vesting_schedules(chain, addrs, cf):
    vesting_list = [
        [BENEFICIARY_1, TEST_AMNT, GENESIS_TIMESTAMP, CLIFF, DURATION, True],
        [BENEFICIARY_1, TEST_AMNT, GENESIS_TIMESTAMP + DAY, 0, DURATION, False],
    ]

    deployed = create_vesting_schedules(cf, addrs.DEPLOYER, vesting_list)

    tv = cf.tokenVesting
    assert [vesting[:-1] for vesting in deployed] == vesting_list
    assert [vesting[-1] for vesting in deployed] == [
        tv.getVestingIdAtIndex(0),
        tv.getVestingIdAtIndex(1),
    ]
    assert tv.getVestingSchedulesCountByBeneficiary(BENEFICIARY_1) == 2
    assert tv.getWithdrawableAmount() == VESTING_FUNDING - 2 * TEST_AMNT


def test_create_vesting_schedules_rev_funds(chain, addrs, cf):
    vesting_list = [
        [BENEFICIARY_1, VESTING_FUNDING, GENESIS_TIMESTAMP, CLIFF, DURATION, True],
        [BENEFICIARY_2, 1, GENESIS_TIMESTAMP, CLIFF, DURATION, True],
    ]

    with reverts("Not enough tokens in the vesting contract to create the schedules"):
        create_vesting_schedules(cf, addrs.DEPLOYER, vesting_list)
    assert cf.tokenVesting.getVestingSchedulesCount() == 0


def test_main(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    vesting_info = write_vesting_info(
        tmp_path / "vesting.csv",
        [
            [BENEFICIARY_1, "1,500", GENESIS_TIMESTAMP, "30", "365", "yes"],
            [BENEFICIARY_2, "200", GENESIS_TIMESTAMP, "0", "180", "no"],
        ],
    )
    environment = {
        "GENESIS_TIMESTAMP": str(GENESIS_TIMESTAMP),
        "DEPLOYER_ACCOUNT_INDEX": "2",
        "VESTING_FUNDING": str(2000 * E_18),
        "VESTING_INFO_FILE": vesting_info,
        "DEPLOYMENT_INFO_FILE": "deployment.csv",
        "LOG_FILE": "test.log",
    }

    chain, cf = main(environment)

    deployer = chain.accounts[2]
    tv = cf.tokenVesting
    assert tv.owner() == deployer
    assert tv.getVestingSchedulesCount() == 2
    assert tv.getVestingSchedulesTotalAmount() == 1700 * E_18
    assert tv.getWithdrawableAmount() == 300 * E_18

    scheduleId = tv.computeVestingScheduleId(BENEFICIARY_1, GENESIS_TIMESTAMP)
    schedule = tv.getVestingSchedule(scheduleId)
    assert schedule.cliffDuration == 30 * DAY
    assert schedule.revocable == True

    with open(tmp_path / "deployment.csv", newline="") as csvfile:
        rows = list(csv.reader(csvfile))
    assert rows[0] == ["TestToken", cf.token.address]
    assert rows[1] == ["TokenVesting", tv.address]
    assert rows[2] == [
        BENEFICIARY_1,
        str(1500 * E_18),
        str(GENESIS_TIMESTAMP),
        str(30 * DAY),
        str(365 * DAY),
        "True",
        scheduleId,
    ]
    assert len(rows) == 4

    # Won't overwrite a previous deployment
    with reverts("Deployment info file deployment.csv already exists"):
        main(environment)


def test_main_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    chain, cf = main({})

    assert cf.tokenVesting.owner() == chain.accounts[0]
    assert cf.tokenVesting.getWithdrawableAmount() == VESTING_FUNDING
    assert cf.tokenVesting.getVestingSchedulesCount() == 0


def test_deploy_vesting_contracts_default(chain, addrs):
    cf = deploy_vesting_contracts(chain, addrs.DEPLOYER)

    assert cf.initialSupply == INIT_TOKEN_SUPPLY
    assert cf.funding == VESTING_FUNDING
    assert cf.token.balanceOf(addrs.DEPLOYER) == INIT_TOKEN_SUPPLY - VESTING_FUNDING
