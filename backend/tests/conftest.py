import os
import tempfile

import pytest

# must be set before badgeshop.config is imported by any test module
_TMP = tempfile.mkdtemp(prefix="badgeshop-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'shop.db')}"
os.environ["BARCODE_DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP, 'barcode.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["SECRET_KEY"] = "test-secret"


@pytest.fixture(autouse=True, scope="session")
def setup_db():
    from badgeshop.db import init_db

    init_db(reset=True)
    yield


class FakeChat:
    """Stands in for AnthropicChatAdapter; records every call."""

    configured = True

    def __init__(self, reply="Sure! What is the badge for?", error=None, enhanced=None):
        self.reply = reply
        self.error = error
        self.enhanced = enhanced
        self.calls = []

    def complete(self, system, message, max_tokens=800, temperature=0.7, model=None):
        self.calls.append(message)
        if self.error:
            raise self.error
        return self.reply

    def enhance_image_prompt(self, prompt):
        return self.enhanced

    def health_check(self):
        return {"success": True, "message": "Connection successful", "response": "Hello..."}


@pytest.fixture
def fake_chat():
    from badgeshop.adapters.anthropic_chat import get_chat_adapter
    from badgeshop.main import app

    fake = FakeChat()
    app.dependency_overrides[get_chat_adapter] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_chat_adapter, None)
