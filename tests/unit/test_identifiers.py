"""Tests for identifier derivation and naming helpers."""

import pytest

from swiftscaffold.models import Fact, FactKind
from swiftscaffold.services.generation import derive_identifier, effective_identifier, element_query
from swiftscaffold.services.generation.identifiers import (
    capitalize_first,
    comment_text,
    swift_string,
    swift_variable,
)


class TestDeriveIdentifier:
    """Tests for derived accessibility identifiers."""

    @pytest.mark.parametrize(
        ("label", "kind", "expected"),
        [
            ("Go", FactKind.BUTTON, "g_button"),
            ("Sign In", FactKind.BUTTON, "si_button"),
            ("User Name", FactKind.TEXT_FIELD, "un_field"),
            ("Password", FactKind.SECURE_FIELD, "p_sf"),
            ("Title", FactKind.TEXT, "t_text"),
            ("Dark Mode", FactKind.TOGGLE, "dm_toggle"),
            ("Size", FactKind.PICKER, "s_picker"),
            ("Volume", FactKind.SLIDER, "v_slider"),
            ("More Details", FactKind.NAVIGATION_LINK, "md_link"),
            ("Items", FactKind.LIST, "i_list"),
        ],
    )
    def test_suffix_per_kind(self, label, kind, expected):
        """Test each kind gets its suffix after the initials."""
        assert derive_identifier(label, kind) == expected

    def test_custom_kind(self):
        """Test a custom view type is lower-cased as the suffix."""
        assert derive_identifier("Rating Bar", "StarRating") == "rb_starrating"
        assert derive_identifier("Rating Bar", FactKind.CUSTOM) == "rb_custom"

    def test_deterministic(self):
        """Test derivation depends only on label and kind."""
        assert derive_identifier("Sign In", FactKind.BUTTON) == derive_identifier("Sign In", FactKind.BUTTON)

    def test_collisions_are_not_resolved(self):
        """Test different labels with the same initials collide."""
        assert derive_identifier("Sign In", FactKind.BUTTON) == derive_identifier("Skip Intro", FactKind.BUTTON)

    def test_empty_label(self):
        """Test an empty label yields just the suffix."""
        assert derive_identifier("", FactKind.BUTTON) == "_button"

    def test_whitespace_runs(self):
        """Test repeated whitespace does not add initials."""
        assert derive_identifier("  Log   Out ", FactKind.BUTTON) == "lo_button"


class TestEffectiveIdentifier:
    """Tests for choosing between explicit and derived identifiers."""

    def test_explicit_identifier_wins(self):
        """Test an explicit identifier is used as is."""
        element = Fact(kind=FactKind.BUTTON, name="Go", identifier="go_action")

        assert effective_identifier(element) == "go_action"

    def test_derived_when_missing(self):
        """Test a missing identifier is derived."""
        assert effective_identifier(Fact(kind=FactKind.BUTTON, name="Go")) == "g_button"

    def test_custom_kind_name(self):
        """Test custom facts derive from their type name."""
        element = Fact(kind=FactKind.CUSTOM, name="Age", custom_kind="Stepper")

        assert effective_identifier(element) == "a_stepper"


class TestHelpers:
    """Tests for Swift naming and escaping helpers."""

    def test_element_query(self):
        """Test element queries per kind."""
        assert element_query(FactKind.BUTTON) == "buttons"
        assert element_query(FactKind.NAVIGATION_LINK) == "buttons"
        assert element_query(FactKind.SECURE_FIELD) == "secureTextFields"
        assert element_query(FactKind.TOGGLE) == "switches"
        assert element_query(FactKind.CUSTOM) == "descendants(matching: .any)"

    def test_swift_string(self):
        """Test quotes and backslashes are escaped."""
        assert swift_string('a "b" \\c') == 'a \\"b\\" \\\\c'

    def test_comment_text(self):
        """Test comment text is flattened and cannot close a block comment."""
        assert comment_text("one\n two */") == "one two * /"

    def test_swift_variable_dedup(self):
        """Test repeated identifiers get numbered names."""
        used: set[str] = set()

        assert swift_variable("si_button", used) == "si_button"
        assert swift_variable("si_button", used) == "si_button2"
        assert swift_variable("si_button", used) == "si_button3"

    def test_swift_variable_sanitizes(self):
        """Test identifiers that are not valid Swift names are rewritten."""
        used: set[str] = set()

        assert swift_variable("login.email-field", used, "Field") == "login_email_fieldField"
        assert swift_variable("9lives", used) == "_9lives"
        assert swift_variable("...", used) == "element"

    def test_capitalize_first(self):
        """Test only the first character is upper-cased."""
        assert capitalize_first("fetchUser") == "FetchUser"
        assert capitalize_first("") == ""
