"""
Unit tests for adapters.script_address
"""

import pytest

from adapters.script_address import address_from_script, pubkey_hash_from_script


class TestAddressFromScript:
    def test_genesis_pubkey_hash(self):
        script = "76a91462e907b15cbf27d5425399ebf6f0fb50ebb88f1888ac"
        assert address_from_script(script) == "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"

    def test_zero_hash(self):
        script = "76a914" + "00" * 20 + "88ac"
        assert address_from_script(script) == "1111111111111111111114oLvT2"

    def test_uppercase_hex(self):
        script = "76A91462E907B15CBF27D5425399EBF6F0FB50EBB88F1888AC"
        assert address_from_script(script) == "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"

    def test_pubkey_hash(self):
        script = "76a91462e907b15cbf27d5425399ebf6f0fb50ebb88f1888ac"
        assert pubkey_hash_from_script(script).hex() == "62e907b15cbf27d5425399ebf6f0fb50ebb88f18"

    @pytest.mark.parametrize(
        "script",
        [
            "006a0568656c6c6f",  # OP_FALSE OP_RETURN data
            "a91462e907b15cbf27d5425399ebf6f0fb50ebb88f1887",  # P2SH
            "76a91462e907b15cbf27d5425399ebf6f0fb50ebb88f18",  # truncated
            "",
        ],
    )
    def test_non_p2pkh_rejected(self, script):
        with pytest.raises(ValueError, match="not pay-to-public-key-hash"):
            address_from_script(script)

    def test_invalid_hex(self):
        with pytest.raises(ValueError, match="not valid hex"):
            address_from_script("zz")
