import pytest

from editorial.core.mappings import BRAND_TABLE, COLOR_TABLE, SLANG_TABLE, MappingTable


def test_longest_key_wins():
    match = BRAND_TABLE.find("adidas samba branco")
    assert match.key == "adidas samba"
    assert match.replacement == "tênis retrô de perfil baixo"


def test_find_is_case_insensitive():
    match = BRAND_TABLE.find("Tênis VANS velho")
    assert match.key == "vans"
    assert (match.start, match.end) == (6, 10)


def test_find_none_when_absent():
    assert BRAND_TABLE.find("camisa de linho") is None
    assert BRAND_TABLE.find("") is None


def test_keys_iterate_longest_first():
    lengths = [len(k) for k in SLANG_TABLE]
    assert lengths == sorted(lengths, reverse=True)


def test_table_is_read_only():
    with pytest.raises(TypeError):
        BRAND_TABLE._entries["nova"] = ""


def test_substitute_replaces_every_occurrence_of_one_key():
    assert COLOR_TABLE.substitute("branco com branco") == "off-white com off-white"


def test_substitute_applies_only_the_longest_entry():
    # "jeans escuro" wins; nothing else in the table is applied afterwards
    assert COLOR_TABLE.substitute("jeans escuro e preto") == "denim escuro e preto"


def test_substitute_is_stable_on_canonical_text():
    once = SLANG_TABLE.substitute("legging preta")
    assert once == "legging de lycra preta"
    assert SLANG_TABLE.substitute(once) == once


def test_remove_drops_all_occurrences():
    assert BRAND_TABLE.remove("Zara blusa zara", "zara") == " blusa "


def test_merged_adds_entries_without_touching_original():
    extra = BRAND_TABLE.merged("brands+extra", {"Jacquemus": ""})
    assert "jacquemus" in extra
    assert "jacquemus" not in BRAND_TABLE
    assert len(extra) == len(BRAND_TABLE) + 1


def test_keys_are_normalized():
    table = MappingTable("t", {"  Azul   Claro ": "azul-claro", "": "x"})
    assert list(table) == ["azul claro"]
    assert table.get("AZUL CLARO") == "azul-claro"
