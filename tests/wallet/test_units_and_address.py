import pytest

from opbnb_wallet.services.address import is_valid_evm_address, normalize_address, same_address
from opbnb_wallet.services.chains import build_opbnb_testnet, get_chain_config, parse_chain_id
from opbnb_wallet.config import Settings
from opbnb_wallet.services.units import format_units, format_units_exact, parse_units


def test_format_units_rounds_to_four_places():
    assert format_units(10**18) == "1.0000"
    assert format_units(0) == "0.0000"
    assert format_units(123456789012345678) == "0.1235"
    assert format_units(99999 * 10**13) == "1.0000"


def test_format_units_handles_large_values_without_float_drift():
    assert format_units(123456789 * 10**18 + 1) == "123456789.0000"


def test_format_units_exact():
    assert format_units_exact(10**18) == "1.0"
    assert format_units_exact(1) == "0.000000000000000001"
    assert format_units_exact(15 * 10**17) == "1.5"


def test_parse_units():
    assert parse_units("1.0000", 18) == 10**18
    assert parse_units("0.1235", 18) == 1235 * 10**14
    assert parse_units("42", 0) == 42
    assert parse_units("-5", 0) == -5
    assert parse_units("7.000", 0) == 7


@pytest.mark.parametrize("text", ["", "abc", "1e18", "0x10", "1.5", "Error", " ", " 1000 ", "1000\n"])
def test_parse_units_rejects_non_integer_wei(text):
    with pytest.raises(ValueError):
        parse_units(text, 0)


def test_address_validation():
    assert is_valid_evm_address("0x2222222222222222222222222222222222222222")
    assert is_valid_evm_address("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
    assert is_valid_evm_address("0x5AAEB6053F3E94C9B9A09F33669435E7EF1BEAED")
    assert is_valid_evm_address("5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed")
    assert not is_valid_evm_address("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAeD")
    assert not is_valid_evm_address("5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAeD")
    assert not is_valid_evm_address("0x123")
    assert not is_valid_evm_address("0xZZ22222222222222222222222222222222222222")
    assert not is_valid_evm_address("")


def test_same_address_ignores_case_and_prefix():
    assert normalize_address("ABCDEFabcdef0000000000000000000000000000") == "0xabcdefabcdef0000000000000000000000000000"
    assert same_address("0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed", "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
    assert not same_address("", "0x1")


def test_chain_config_payload_and_links():
    chain = build_opbnb_testnet(Settings(rpc_api_key="abc123"))

    assert chain.chain_id_hex == "0x15eb"
    params = chain.to_add_chain_params()
    assert params["chainId"] == "0x15eb"
    assert params["chainName"] == "opBNB Testnet"
    assert params["nativeCurrency"] == {"name": "tBNB", "symbol": "tBNB", "decimals": 18}
    assert params["rpcUrls"] == ["https://opbnb-testnet.infura.io/v3/abc123"]
    assert params["blockExplorerUrls"] == ["https://testnet.opbnbscan.com/"]
    assert chain.tx_url("0xabc") == "https://testnet.opbnbscan.com/tx/0xabc"


def test_chain_matches_any_id_format():
    chain = get_chain_config()
    assert chain.matches("0x15eb")
    assert chain.matches("0x15EB")
    assert chain.matches(5611)
    assert chain.matches("5611")
    assert not chain.matches("0x1")
    assert parse_chain_id("not-a-chain") is None
    assert parse_chain_id(None) is None
