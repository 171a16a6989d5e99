"""Tests for the credential resolver."""

import keyring
import pytest
from keyring.errors import NoKeyringError

from mailacct.auth import CredentialResolver, NotInteractiveError, PromptFailedError
from mailacct.auth.resolver import keyring_service
from mailacct.core import AccountFlags, AccountType

from conftest import FakePrompter


# =============================================================================
# get_user
# =============================================================================

class TestGetUser:
    def test_already_known_is_untouched(self, config, imap_account):
        imap_account.set_user("bob")
        prompter = FakePrompter()
        CredentialResolver(config, prompter).get_user(imap_account)

        assert imap_account.user == "bob"
        assert prompter.calls == []

    def test_configured_user(self, config, prompter, imap_account):
        config.for_type(AccountType.IMAP).user = "configured"
        CredentialResolver(config, prompter).get_user(imap_account)

        assert imap_account.user == "configured"
        assert imap_account.has(AccountFlags.USER)
        assert prompter.calls == []

    def test_prompts_with_system_username_default(self, config, imap_account):
        prompter = FakePrompter(lines=["typed"])
        CredentialResolver(config, prompter).get_user(imap_account)

        assert imap_account.user == "typed"
        assert prompter.calls == [("line", "Username at imap.example.com: ", "sysuser")]

    def test_non_interactive_fails_without_prompting(self, config, imap_account):
        config.interactive = False
        prompter = FakePrompter(lines=["typed"])

        with pytest.raises(NotInteractiveError):
            CredentialResolver(config, prompter).get_user(imap_account)

        assert prompter.calls == []
        assert not imap_account.has(AccountFlags.USER)

    def test_no_prompter_is_non_interactive(self, config, imap_account):
        with pytest.raises(NotInteractiveError):
            CredentialResolver(config).get_user(imap_account)

    def test_cancelled_prompt(self, config, imap_account):
        with pytest.raises(PromptFailedError):
            CredentialResolver(config, FakePrompter()).get_user(imap_account)
        assert not imap_account.has(AccountFlags.USER)

    def test_second_call_does_not_prompt_again(self, config, imap_account):
        prompter = FakePrompter(lines=["first", "second"])
        resolver = CredentialResolver(config, prompter)

        resolver.get_user(imap_account)
        resolver.get_user(imap_account)

        assert imap_account.user == "first"
        assert len(prompter.calls) == 1


# =============================================================================
# get_login
# =============================================================================

class TestGetLogin:
    def test_imap_configured_login(self, config, prompter, imap_account):
        config.for_type(AccountType.IMAP).login = "bob@example.com"
        CredentialResolver(config, prompter).get_login(imap_account)

        assert imap_account.login == "bob@example.com"
        assert imap_account.has(AccountFlags.LOGIN)
        assert not imap_account.has(AccountFlags.USER)
        assert prompter.calls == []

    def test_login_setting_ignored_for_other_protocols(self, config, prompter, smtp_account):
        config.for_type(AccountType.SMTP).login = "ignored"
        smtp_account.set_user("bob")
        CredentialResolver(config, prompter).get_login(smtp_account)

        assert smtp_account.login == "bob"

    def test_falls_back_to_user(self, config, imap_account):
        config.for_type(AccountType.IMAP).user = "bob"
        CredentialResolver(config).get_login(imap_account)

        assert imap_account.login == "bob"
        assert imap_account.has(AccountFlags.USER | AccountFlags.LOGIN)

    def test_user_failure_propagates(self, config, imap_account):
        config.interactive = False
        with pytest.raises(NotInteractiveError):
            CredentialResolver(config).get_login(imap_account)
        assert not imap_account.has(AccountFlags.LOGIN)

    def test_already_known(self, config, imap_account):
        imap_account.set_login("kept")
        config.for_type(AccountType.IMAP).login = "other"
        CredentialResolver(config).get_login(imap_account)
        assert imap_account.login == "kept"


# =============================================================================
# get_pass / unset_pass / forget_pass
# =============================================================================

class TestGetPass:
    def test_configured_password(self, config, prompter, smtp_account):
        config.for_type(AccountType.SMTP).password = "configured"
        CredentialResolver(config, prompter).get_pass(smtp_account)

        assert smtp_account.password == "configured"
        assert smtp_account.has(AccountFlags.PASS)
        assert prompter.calls == []

    def test_each_protocol_has_its_own_password(self, config, imap_account):
        config.for_type(AccountType.POP).password = "pop-only"
        config.interactive = False

        with pytest.raises(NotInteractiveError):
            CredentialResolver(config).get_pass(imap_account)

    def test_prompt_names_login_and_host(self, config, imap_account):
        imap_account.set_user("bob")
        imap_account.set_login("robert")
        prompter = FakePrompter(passwords=["secret"])
        CredentialResolver(config, prompter).get_pass(imap_account)

        assert imap_account.password == "secret"
        assert prompter.calls == [("password", "Password for robert@imap.example.com: ")]

    def test_prompt_uses_user_without_login(self, config, imap_account):
        imap_account.set_user("bob")
        prompter = FakePrompter(passwords=["secret"])
        CredentialResolver(config, prompter).get_pass(imap_account)

        assert prompter.calls == [("password", "Password for bob@imap.example.com: ")]

    def test_empty_password_fails(self, config, imap_account):
        prompter = FakePrompter(passwords=[""])
        with pytest.raises(PromptFailedError):
            CredentialResolver(config, prompter).get_pass(imap_account)
        assert not imap_account.has(AccountFlags.PASS)

    def test_cancelled_password_prompt(self, config, imap_account):
        with pytest.raises(PromptFailedError):
            CredentialResolver(config, FakePrompter()).get_pass(imap_account)

    def test_non_interactive(self, config, imap_account):
        config.interactive = False
        prompter = FakePrompter(passwords=["secret"])
        with pytest.raises(NotInteractiveError):
            CredentialResolver(config, prompter).get_pass(imap_account)
        assert prompter.calls == []

    def test_failure_leaves_other_fields_alone(self, config, imap_account):
        imap_account.set_user("bob")
        imap_account.set_login("bob")
        config.interactive = False

        with pytest.raises(NotInteractiveError):
            CredentialResolver(config).get_pass(imap_account)

        assert imap_account.has(AccountFlags.USER | AccountFlags.LOGIN)
        assert imap_account.user == "bob"

    def test_idempotent(self, config, imap_account):
        prompter = FakePrompter(passwords=["one", "two"])
        resolver = CredentialResolver(config, prompter)

        resolver.get_pass(imap_account)
        resolver.get_pass(imap_account)

        assert imap_account.password == "one"
        assert len(prompter.calls) == 1

    def test_unset_pass_forces_new_prompt(self, config, imap_account):
        prompter = FakePrompter(passwords=["stale", "fresh"])
        resolver = CredentialResolver(config, prompter)

        resolver.get_pass(imap_account)
        resolver.unset_pass(imap_account)
        resolver.get_pass(imap_account)

        assert imap_account.password == "fresh"
        assert len(prompter.calls) == 2


class TestKeyring:
    @pytest.fixture
    def keyring_config(self, config):
        config.for_type(AccountType.IMAP).use_keyring = True
        return config

    def test_keyring_password_used(self, keyring_config, fake_keyring, imap_account):
        imap_account.set_user("bob")
        fake_keyring[(keyring_service(imap_account), "bob@imap.example.com")] = "stored"
        prompter = FakePrompter()

        CredentialResolver(keyring_config, prompter).get_pass(imap_account)

        assert imap_account.password == "stored"
        assert prompter.calls == []

    def test_configured_password_beats_keyring(self, keyring_config, fake_keyring, imap_account):
        imap_account.set_user("bob")
        fake_keyring[("mailacct:imap", "bob@imap.example.com")] = "stored"
        keyring_config.for_type(AccountType.IMAP).password = "configured"

        CredentialResolver(keyring_config).get_pass(imap_account)

        assert imap_account.password == "configured"

    def test_prompted_password_is_saved(self, keyring_config, fake_keyring, imap_account):
        imap_account.set_user("bob")
        prompter = FakePrompter(passwords=["typed"])

        CredentialResolver(keyring_config, prompter).get_pass(imap_account)

        assert fake_keyring[("mailacct:imap", "bob@imap.example.com")] == "typed"

    def test_keyring_ignored_when_disabled(self, config, fake_keyring, imap_account):
        imap_account.set_user("bob")
        fake_keyring[("mailacct:imap", "bob@imap.example.com")] = "stored"
        config.interactive = False

        with pytest.raises(NotInteractiveError):
            CredentialResolver(config).get_pass(imap_account)

    def test_forget_pass_removes_stored_password(self, keyring_config, fake_keyring, imap_account):
        imap_account.set_user("bob")
        fake_keyring[("mailacct:imap", "bob@imap.example.com")] = "rejected"
        prompter = FakePrompter(passwords=["fresh"])
        resolver = CredentialResolver(keyring_config, prompter)

        resolver.get_pass(imap_account)
        assert imap_account.password == "rejected"

        resolver.forget_pass(imap_account)
        resolver.get_pass(imap_account)

        assert imap_account.password == "fresh"
        assert fake_keyring[("mailacct:imap", "bob@imap.example.com")] == "fresh"

    def test_forget_pass_without_stored_password(self, keyring_config, imap_account):
        imap_account.set_user("bob")
        imap_account.set_password("pw")

        CredentialResolver(keyring_config).forget_pass(imap_account)

        assert not imap_account.has(AccountFlags.PASS)

    def test_forget_pass_survives_keyring_failure(self, keyring_config, monkeypatch, imap_account, caplog):
        def broken_delete(service, username):
            raise NoKeyringError("no backend")

        monkeypatch.setattr(keyring, "delete_password", broken_delete)
        imap_account.set_user("bob")
        imap_account.set_password("pw")

        CredentialResolver(keyring_config).forget_pass(imap_account)

        assert not imap_account.has(AccountFlags.PASS)
        assert "Could not remove password from keyring" in caplog.text
