"""Tests for policy resolution from option values."""

import pytest

from image_pull.exceptions import InvalidInputError
from image_pull.models import PullPolicy, VerifyMode
from image_pull.services import PolicyResolver, parse_boolean, parse_verify_mode
from image_pull.services.policy_resolver import normalize_option_name


class TestParseBoolean:
    """Test parse_boolean function."""

    @pytest.mark.parametrize("value", ["1", "yes", "y", "true", "t", "on", "YES", " True ", True])
    def test_true_values(self, value):
        """Test accepted spellings of true."""
        assert parse_boolean(value) is True

    @pytest.mark.parametrize("value", ["0", "no", "n", "false", "f", "off", "Off", False])
    def test_false_values(self, value):
        """Test accepted spellings of false."""
        assert parse_boolean(value) is False

    @pytest.mark.parametrize("value", ["", "maybe", "2", None, 1])
    def test_invalid_values(self, value):
        """Test that anything else is rejected."""
        with pytest.raises(ValueError):
            parse_boolean(value)


class TestParseVerifyMode:
    """Test parse_verify_mode function."""

    @pytest.mark.parametrize(
        "value,expected",
        [("no", VerifyMode.NONE), ("checksum", VerifyMode.CHECKSUM), ("signature", VerifyMode.SIGNATURE)],
    )
    def test_literals(self, value, expected):
        """Test the three verification literals."""
        assert parse_verify_mode(value) is expected

    @pytest.mark.parametrize("value", ["yes", "sig", "", "SIGNATURE"])
    def test_invalid(self, value):
        """Test that other values are input errors."""
        with pytest.raises(InvalidInputError, match=f"Invalid verification setting '{value}'"):
            parse_verify_mode(value)


class TestPolicyResolver:
    """Test PolicyResolver folding."""

    def test_no_options_gives_defaults(self):
        """Test that an empty option list yields the defaults."""
        assert PolicyResolver().resolve([]) == PullPolicy()

    def test_force_flag_without_value(self):
        """Test that --force without a value enables force."""
        assert PolicyResolver().resolve([("force", None)]).force is True

    def test_force_from_config_boolean(self):
        """Test that a config boolean sets force."""
        assert PolicyResolver().resolve([("force", False)]).force is False

    def test_options_folded_in_order(self):
        """Test that a later option overrides an earlier one."""
        policy = PolicyResolver().resolve([("verify", "no"), ("verify", "checksum")])
        assert policy.verify is VerifyMode.CHECKSUM

    def test_roothash_off_then_signature_on(self):
        """Test --roothash=false --roothash-signature=true leaves both off."""
        policy = PolicyResolver().resolve([("roothash", "false"), ("roothash-signature", "true")])
        assert policy.roothash is False
        assert policy.roothash_signature is False

    def test_signature_on_then_roothash_off(self):
        """Test the reverse order leaves both off too."""
        policy = PolicyResolver().resolve([("roothash-signature", "true"), ("roothash", "false")])
        assert policy.roothash is False
        assert policy.roothash_signature is False

    def test_image_root(self):
        """Test --image-root."""
        assert PolicyResolver().resolve([("--image-root", "/srv/machines")]).image_root == "/srv/machines"

    def test_empty_image_root(self):
        """Test that an empty image root is rejected."""
        with pytest.raises(InvalidInputError):
            PolicyResolver().resolve([("image-root", "")])

    def test_invalid_boolean(self):
        """Test the message for an unparsable boolean."""
        with pytest.raises(InvalidInputError, match="Failed to parse --verity= parameter 'maybe'"):
            PolicyResolver().resolve([("verity", "maybe")])

    def test_unknown_option(self):
        """Test that unknown option names are rejected."""
        with pytest.raises(InvalidInputError, match="Unknown option 'colour'"):
            PolicyResolver().resolve([("colour", "blue")])

    def test_underscore_spelling(self):
        """Test that config-style underscore names are accepted."""
        policy = PolicyResolver().resolve([("roothash_signature", False), ("image_root", "/tmp/m")])
        assert policy.roothash_signature is False
        assert policy.image_root == "/tmp/m"

    def test_base_policy(self):
        """Test folding on top of an explicit base policy."""
        base = PullPolicy(verify=VerifyMode.NONE)
        policy = PolicyResolver().resolve([("settings", "no")], base=base)
        assert policy.verify is VerifyMode.NONE
        assert policy.settings is False
        assert base.settings is True

    def test_custom_defaults(self):
        """Test a resolver with its own defaults."""
        resolver = PolicyResolver(defaults=PullPolicy(force=True))
        assert resolver.resolve([]).force is True

    def test_normalize_option_name(self):
        """Test option name normalization."""
        assert normalize_option_name("--roothash_signature") == "roothash-signature"
        assert normalize_option_name("image_root") == "image-root"
