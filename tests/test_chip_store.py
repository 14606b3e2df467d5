import json

import pytest

from dls.chips import ChipStore, DefinitionNotFound, MalformedDefinition


def test_sub_chips_keep_order_and_repeats(tmp_path):
    chips = tmp_path / "Chips"
    chips.mkdir()
    (chips / "MUX.json").write_text(json.dumps({
        "Name": "MUX",
        "SubChips": [{"Name": "NOT"}, {"Name": "AND"}, {"Name": "AND"}, {"Name": "OR"}],
    }), encoding="utf-8")
    store = ChipStore(tmp_path)

    assert store.sub_chips("MUX") == ["NOT", "AND", "AND", "OR"]
    assert store.reads == 1
    assert store.read_counts["MUX"] == 1


def test_reads_definitions_with_bom(tmp_path):
    chips = tmp_path / "Chips"
    chips.mkdir()
    (chips / "NOT.json").write_bytes(b"\xef\xbb\xbf" + json.dumps({"SubChips": [{"Name": "NAND"}]}).encode())

    assert ChipStore(tmp_path).sub_chips("NOT") == ["NAND"]


def test_missing_file(tmp_path):
    store = ChipStore(tmp_path)

    assert not store.exists("GHOST")
    with pytest.raises(DefinitionNotFound) as exc:
        store.load("GHOST")
    assert exc.value.path.endswith("GHOST.json")
    assert store.reads == 0


def test_null_sub_chip_list_is_malformed(tmp_path):
    chips = tmp_path / "Chips"
    chips.mkdir()
    (chips / "EMPTY.json").write_text(json.dumps({"SubChips": None}), encoding="utf-8")

    with pytest.raises(MalformedDefinition, match="SubChips missing or not array"):
        ChipStore(tmp_path).sub_chips("EMPTY")


def test_undecodable_file_is_malformed(tmp_path):
    chips = tmp_path / "Chips"
    chips.mkdir()
    (chips / "BAD.json").write_bytes(b'{"SubChips": [{"Name": "\xff"}]}')
    store = ChipStore(tmp_path)

    with pytest.raises(MalformedDefinition, match="Failed to read chip file for BAD"):
        store.load("BAD")
    assert store.read_counts["BAD"] == 1
