"""Tests for the structural pattern library."""

import pytest

from swiftscaffold.models import FactKind
from swiftscaffold.services.extraction import PatternLibrary, infer_literal_type


class TestDeclarationPatterns:
    """Tests for function and property matchers."""

    def test_function_with_qualifiers_and_effects(self):
        """Test a static throwing function is fully captured."""
        matches = PatternLibrary.functions("public static func fetch(id: Int) async throws -> User {")

        assert len(matches) == 1
        match = matches[0]
        assert match.name == "fetch"
        assert match.is_static
        assert match.qualifiers == ("public", "static")
        assert match.effects == ("async", "throws")
        assert match.declared_type == "User"
        assert match.parameters == "id: Int"

    def test_function_without_return(self):
        """Test a function with no return clause."""
        matches = PatternLibrary.functions("func reset() {\n}")

        assert matches[0].name == "reset"
        assert matches[0].declared_type is None
        assert matches[0].parameters is None
        assert not matches[0].is_static

    def test_class_qualifier_is_static(self):
        """Test `class func` counts as a type member."""
        matches = PatternLibrary.functions("class func make() -> Self {")

        assert matches[0].is_static

    def test_closure_parameter(self):
        """Test parentheses inside a parameter type stay in the parameter list."""
        matches = PatternLibrary.functions("func load(completion: @escaping (Int) -> Void) {\n}")

        assert matches[0].name == "load"
        assert matches[0].parameters == "completion: @escaping (Int) -> Void"
        assert matches[0].declared_type is None

    def test_closure_parameter_with_return(self):
        """Test the return clause after a closure parameter is still found."""
        matches = PatternLibrary.functions("func map(_ transform: (String) throws -> Int) rethrows -> [Int] {")

        assert matches[0].parameters == "_ transform: (String) throws -> Int"
        assert matches[0].effects == ("rethrows",)
        assert matches[0].declared_type == "[Int]"

    def test_generic_function(self):
        """Test generic parameters do not break matching."""
        matches = PatternLibrary.functions("func decode<T: Decodable>(_ type: T.Type) throws -> T {")

        assert matches[0].name == "decode"
        assert matches[0].declared_type == "T"

    def test_annotated_property(self):
        """Test a property with a type annotation."""
        matches = PatternLibrary.properties("private(set) var count: Int = 0")

        assert len(matches) == 1
        assert matches[0].name == "count"
        assert matches[0].declared_type == "Int"
        assert matches[0].qualifiers == ("private",)

    def test_optional_and_collection_types(self):
        """Test optional and collection annotations keep their shape."""
        matches = PatternLibrary.properties("let items: [String]\nvar user: User?\n")

        assert [(m.name, m.declared_type) for m in matches] == [("items", "[String]"), ("user", "User?")]

    def test_unannotated_property_is_ignored(self):
        """Test properties without an annotation are not matched."""
        assert PatternLibrary.properties("let shared = Store()") == []

    def test_some_view_property(self):
        """Test opaque result types are matched."""
        matches = PatternLibrary.properties("var body: some View {")

        assert matches[0].declared_type == "some View"

    def test_type_names_in_order(self):
        """Test type declarations are reported in source order."""
        source = "struct A {}\nextension B {}\nenum C {}"

        assert PatternLibrary.type_names(source) == ["A", "B", "C"]


class TestElementPatterns:
    """Tests for UI element matchers."""

    @pytest.mark.parametrize(
        "source",
        [
            'Button("Sign In") { login() }',
            'Button(action: { login() }) { Text("Sign In") }',
            'Button(action: login) {\n    Text("Sign In")\n}',
            'Button { login() } label: { Text("Sign In") }',
        ],
    )
    def test_button_label_forms(self, source):
        """Test every button form yields the same label."""
        matches = PatternLibrary.buttons(source)

        assert [m.label for m in matches] == ["Sign In"]
        assert matches[0].kind is FactKind.BUTTON

    def test_text_and_secure_fields(self):
        """Test text inputs are split by control."""
        source = 'TextField("Email", text: $email)\nSecureField("Password", text: $password)'
        matches = PatternLibrary.text_inputs(source)

        assert [(m.kind, m.label, m.binding) for m in matches] == [
            (FactKind.TEXT_FIELD, "Email", "$email"),
            (FactKind.SECURE_FIELD, "Password", "$password"),
        ]

    def test_static_text(self):
        """Test static text matches and escaped quotes survive."""
        matches = PatternLibrary.static_texts('Text("Say \\"hi\\"")')

        assert matches[0].label == 'Say \\"hi\\"'

    def test_text_member_call_is_not_static_text(self):
        """Test `.Text(` style member calls are not static text."""
        assert PatternLibrary.static_texts('Foo.Text("nope")') == []

    def test_toggle(self):
        """Test toggles capture label and binding."""
        matches = PatternLibrary.toggles('Toggle("Dark Mode", isOn: $isDark)')

        assert matches[0].label == "Dark Mode"
        assert matches[0].binding == "$isDark"

    @pytest.mark.parametrize(
        "source",
        [
            'NavigationLink("Details", destination: DetailView())',
            'NavigationLink(destination: DetailView()) { Text("Details") }',
            'NavigationLink { DetailView() } label: { Text("Details") }',
        ],
    )
    def test_navigation_link_forms(self, source):
        """Test every navigation link form yields the label."""
        assert [m.label for m in PatternLibrary.navigation_links(source)] == ["Details"]

    def test_identifier_forms(self):
        """Test both accessibility identifier spellings."""
        assert PatternLibrary.identifier('.accessibilityIdentifier("a_id")') == "a_id"
        assert PatternLibrary.identifier('.accessibility(identifier: "b_id")') == "b_id"
        assert PatternLibrary.identifier(".padding()") is None

    def test_modifiers_in_order(self):
        """Test modifier names are reported in order."""
        assert PatternLibrary.modifiers(".padding()\n.foregroundColor(.red)") == ["padding", "foregroundColor"]

    def test_no_match_is_empty(self):
        """Test matchers are total on unrelated text."""
        text = "let x = 1"

        assert PatternLibrary.buttons(text) == []
        assert PatternLibrary.text_inputs(text) == []
        assert PatternLibrary.toggles(text) == []
        assert PatternLibrary.navigation_links(text) == []


class TestViewStructure:
    """Tests for view-level matchers."""

    def test_framework_marker(self):
        """Test the SwiftUI import is recognized."""
        assert PatternLibrary.has_framework_marker("import Foundation\nimport SwiftUI\n")
        assert not PatternLibrary.has_framework_marker("import UIKit\n// import SwiftUI is not here")

    def test_view_name_with_conformances(self):
        """Test the view name is found after other conformances."""
        assert PatternLibrary.view_name("struct Home: Equatable, View {") == "Home"
        assert PatternLibrary.view_name("struct Model: Codable {") is None

    def test_state_variables(self):
        """Test state types come from annotations or literals."""
        source = (
            "@State private var isOn = false\n"
            "@State var count: Int = 0\n"
            '@State var name = ""\n'
            "@State var ratio = 0.5\n"
            "@StateObject var store = Store()\n"
            "@Binding var value\n"
        )

        assert PatternLibrary.state_variables(source) == {
            "isOn": "Bool",
            "count": "Int",
            "name": "String",
            "ratio": "Double",
            "store": "Store",
            "value": "Any",
        }

    def test_environment_objects(self):
        """Test environment objects map name to type."""
        source = "@EnvironmentObject var session: SessionStore"

        assert PatternLibrary.environment_objects(source) == {"session": "SessionStore"}

    def test_structural_flags(self):
        """Test structural markers are detected independently."""
        flags = PatternLibrary.structural_flags("NavigationStack { List {} }.alert(isPresented: $x) {}")

        assert flags.is_navigation_container
        assert flags.has_alert
        assert not flags.has_tab_container
        assert not flags.has_context_menu


class TestBodyIsolation:
    """Tests for body region isolation."""

    def test_isolates_balanced_body(self):
        """Test the body is cut at its matching brace."""
        source = 'var body: some View { VStack { Text("a") } }\nfunc other() { Button("b") {} }'

        body = PatternLibrary.isolate_body(source)

        assert body is not None
        assert 'Text("a")' in body
        assert "other" not in body

    def test_braces_in_strings_and_comments_are_skipped(self):
        """Test braces inside literals do not affect the count."""
        source = 'var body: some View {\n Text("}") // }\n Text("ok")\n}\nlet tail = 1'

        body = PatternLibrary.isolate_body(source)

        assert body is not None
        assert 'Text("ok")' in body
        assert "tail" not in body

    def test_unbalanced_body(self):
        """Test an unbalanced body yields None."""
        assert PatternLibrary.isolate_body("var body: some View { VStack {") is None

    def test_no_body(self):
        """Test a source without a body opening yields None."""
        assert PatternLibrary.isolate_body("struct A {}") is None


class TestLiteralTypes:
    """Tests for literal type inference."""

    @pytest.mark.parametrize(
        ("expression", "expected"),
        [
            ('"hello"', "String"),
            ("true", "Bool"),
            ("false // off", "Bool"),
            ("42", "Int"),
            ("-3.5", "Double"),
            ("Date()", "Date"),
            ("[1, 2]", None),
            ("", None),
        ],
    )
    def test_infer_literal_type(self, expression, expected):
        """Test literal inference for common initializers."""
        assert infer_literal_type(expression) == expected
