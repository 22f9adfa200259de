"""Tests for name disambiguation."""

from kompass.disambiguate import display_name, display_names
from kompass.models import ComponentEntry


def _entry(name, namespace):
    return ComponentEntry(name=name, namespace=namespace, tags=("latest",))


def test_active_namespace_duplicate_is_marked():
    """Test the active-namespace row of a cross-namespace duplicate gets the marker."""
    section = [_entry("nodejs", "openshift"), _entry("nodejs", "other-ns")]

    assert display_names(section, "openshift") == ["nodejs (*)", "nodejs"]


def test_other_namespace_is_never_marked():
    """Test only the active namespace is marked."""
    section = [_entry("nodejs", "openshift"), _entry("nodejs", "other-ns")]

    assert display_names(section, "myproject") == ["nodejs", "nodejs"]


def test_unique_names_are_unmarked():
    """Test rows without a collision keep their name."""
    section = [_entry("nodejs", "myproject"), _entry("python", "openshift")]

    assert display_names(section, "myproject") == ["nodejs", "python"]


def test_same_namespace_duplicate_is_unmarked():
    """Test a duplicate in the same namespace is not a collision."""
    section = [_entry("nodejs", "myproject"), _entry("nodejs", "myproject")]

    assert display_names(section, "myproject") == ["nodejs", "nodejs"]


def test_collision_is_per_section():
    """Test a row is only compared against its own section."""
    supported = [_entry("nodejs", "myproject")]
    unsupported = [_entry("nodejs", "openshift")]

    assert display_name(supported[0], supported, "myproject") == "nodejs"
    assert display_name(supported[0], supported + unsupported, "myproject") == "nodejs (*)"


def test_disambiguation_is_idempotent():
    """Test repeated runs give the same labels and leave rows unchanged."""
    section = [_entry("nodejs", "openshift"), _entry("nodejs", "other-ns"), _entry("ruby", "openshift")]
    before = list(section)

    first = display_names(section, "openshift")
    second = display_names(section, "openshift")

    assert first == second
    assert section == before
    assert all("(*)" not in entry.name for entry in section)
