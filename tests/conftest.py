# tests/conftest.py
import sys, pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))  # run from a checkout without installing


VULNERABLE = """\
pragma solidity ^0.8.0;

contract Bank {
    mapping(address => uint256) public balances;
    address public owner;

    function withdraw(uint256 amt) external {
        (bool ok, ) = msg.sender.call{value: amt}("");
        require(ok);
        balances[msg.sender] -= amt;
    }

    function kill() external {
        require(tx.origin == owner);
        selfdestruct(payable(owner));
    }

    function lucky() external view returns (uint256) {
        return uint256(keccak256(abi.encodePacked(block.timestamp, msg.sender)));
    }
}
"""

CLEAN = """\
// SPDX-License-Identifier: MIT
pragma solidity 0.8.20;

contract Counter {
    uint256 public count;

    function increment() external {
        count += 1;
    }
}
"""

GASSY = """\
pragma solidity 0.8.20;

contract Gas {
    uint256 public total;
    address public token;

    struct Slot {
        uint256 a;
        uint8 b;
        uint256 c;
    }

    constructor(address t) {
        token = t;
    }

    function sum(uint256[] memory xs) public {
        for (uint256 i = 0; i < xs.length; i++) {
            total += xs[i];
        }
        require(total > 0, "empty");
    }
}
"""


@pytest.fixture
def write_contract(tmp_path):
    """Factory: write ``text`` to ``tmp_path/name`` and return the path as str."""
    def _write(name: str, text: str) -> str:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return str(p)
    return _write
