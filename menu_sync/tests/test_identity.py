from menu_sync.sheets.identity import IdentityDeriver, normalize_label


def test_normalize_label_strips_non_alphanumerics():
    assert normalize_label("Mama's Kitchen") == "mamaskitchen"
    assert normalize_label("Area 47 Grill!") == "area47grill"
    assert normalize_label("Café Zomba") == "cafzomba"


def test_derive_prefixes_normalized_label():
    deriver = IdentityDeriver()
    assert deriver.derive("Nyama House") == "nyamahouse0001"


def test_identical_labels_get_distinct_ids_within_a_pass():
    deriver = IdentityDeriver()
    first = deriver.derive("Lake View")
    second = deriver.derive("lake-view")
    assert first != second
    assert first.startswith("lakeview")
    assert second.startswith("lakeview")


def test_separate_passes_restart_the_sequence():
    assert IdentityDeriver().derive("Spice Garden") == IdentityDeriver().derive("Spice Garden")
