"""Test configuration for swiftscaffold."""

from __future__ import annotations

import asyncio
import json

import pytest
from pydantic import SecretStr

from swiftscaffold.core.config import Config, EscalationConfig
from swiftscaffold.core.exceptions import ExternalServiceError, ServiceErrorKind


class StubServiceClient:
    """Service client double that records prompts and returns canned replies.

    Each entry in ``replies`` is either a string reply or an exception to
    raise. The last entry is reused once the list runs out.
    """

    provider = "stub"
    model_name = "stub-model"

    def __init__(self, *replies: str | Exception, delay: float = 0.0) -> None:
        self.replies = list(replies) or [""]
        self.delay = delay
        self.prompts: list[str] = []
        self.system_prompts: list[str | None] = []
        self.closed = 0

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str, system_prompt: str | None = None, expect_json: bool = False) -> str:
        self.prompts.append(prompt)
        self.system_prompts.append(system_prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies[min(len(self.prompts), len(self.replies)) - 1]
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def aclose(self) -> None:
        self.closed += 1


@pytest.fixture
def stub_client_factory():
    """Build stub service clients.

    Returns:
        Callable creating a StubServiceClient from canned replies.
    """
    return StubServiceClient


@pytest.fixture
def escalation_config():
    """Configuration with escalation enabled and a fake API key.

    Returns:
        Config: A config whose escalation is available, with a short deadline.
    """
    return Config(
        openai_api_key=SecretStr("sk-test"),
        escalation=EscalationConfig(enabled=True, timeout_seconds=2.0),
    )


@pytest.fixture
def offline_config():
    """Configuration with escalation disabled.

    Returns:
        Config: A config that never escalates.
    """
    return Config(
        openai_api_key=None,
        escalation=EscalationConfig(enabled=False),
    )


@pytest.fixture
def network_error():
    """A transient network failure from the service boundary."""
    return ExternalServiceError(message="connection reset", kind=ServiceErrorKind.NETWORK, provider="stub")


@pytest.fixture
def login_view_source():
    """The minimal SwiftUI view with one button.

    Returns:
        str: Source of a `Login` view with a single `Go` button.
    """
    return 'import SwiftUI\n\nstruct Login: View { var body: some View { Button("Go") {} } }\n'


@pytest.fixture
def form_view_source():
    """A SwiftUI form view exercising every element pass.

    Returns:
        str: Source with state, inputs, text, toggle, buttons and links
            inside a NavigationView.
    """
    return """import SwiftUI

struct SettingsView: View {
    @State private var username = ""
    @State private var password: String = ""
    @State private var isEnabled = false
    @EnvironmentObject var session: SessionStore

    var body: some View {
        NavigationView {
            VStack {
                Text("Account Settings")
                TextField("User Name", text: $username)
                    .accessibilityIdentifier("username_field")
                SecureField("Password", text: $password)
                Toggle("Notifications", isOn: $isEnabled)
                Button("Save") { session.save() }
                .accessibility(identifier: "save_button")
                Button(action: { session.logout() }) {
                    Text("Log Out")
                }
                NavigationLink("Privacy", destination: PrivacyView())
            }
            .alert(isPresented: $isEnabled) {
                Alert(title: Text("Saved"))
            }
        }
    }
}
"""


@pytest.fixture
def declaration_source():
    """A Swift type with static and instance members.

    Returns:
        str: Source of a `Calculator` class.
    """
    return """import Foundation

final class Calculator {
    static let shared = Calculator()
    var total: Int = 0
    private(set) var label: String = ""

    static func run() {
        print("running")
    }

    func add(_ value: Int, to other: Int) -> Int {
        return value + other
    }

    func isZero() -> Bool {
        return total == 0
    }

    func load(named name: String) async throws -> String {
        return name
    }
}
"""


@pytest.fixture
def view_payload_json():
    """A view analysis reply from the service.

    Returns:
        str: JSON text describing a view with two elements.
    """
    return json.dumps(
        {
            "name": "ProfileView",
            "elements": [
                {"type": "button", "label": "Edit", "identifier": "edit_button", "hasAction": True},
                {"type": "text", "label": "", "identifier": None},
                {"type": "Stepper", "label": "Age", "modifiers": ["padding"]},
            ],
            "stateVariables": [{"name": "isEditing", "type": "Bool"}],
            "isNavigationView": True,
            "hasTabBar": False,
            "hasAlert": False,
            "hasContextMenu": True,
            "environmentObjects": [],
        }
    )
