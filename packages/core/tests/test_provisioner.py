"""Tests for lhci provisioning."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from lhcheck_core.errors import ToolInstallError
from lhcheck_core.provisioner import ensure_lhci, install_lhci, lhci_version


class TestLhciVersion:
    def test_returns_version_when_installed(self):
        with patch("subprocess.run", return_value=MagicMock(stdout="0.13.0\n")) as mock_run:
            assert lhci_version() == "0.13.0"
        mock_run.assert_called_once_with(["lhci", "--version"], capture_output=True, text=True, check=True)

    def test_returns_none_when_missing(self):
        with patch("subprocess.run", side_effect=FileNotFoundError):
            assert lhci_version() is None

    def test_returns_none_when_command_fails(self):
        with patch("subprocess.run", side_effect=subprocess.CalledProcessError(127, ["lhci"])):
            assert lhci_version() is None


class TestInstallLhci:
    def test_raises_with_captured_output(self):
        failed = MagicMock(returncode=1, stdout="npm out", stderr="EACCES")
        with patch("subprocess.run", return_value=failed):
            with pytest.raises(ToolInstallError) as exc_info:
                install_lhci("@lhci/cli")
        assert exc_info.value.returncode == 1
        assert exc_info.value.stdout == "npm out"
        assert exc_info.value.stderr == "EACCES"
        assert exc_info.value.command == ["npm", "install", "-g", "@lhci/cli"]

    def test_raises_when_npm_missing(self):
        with patch("subprocess.run", side_effect=FileNotFoundError("npm")):
            with pytest.raises(ToolInstallError):
                install_lhci()


class TestEnsureLhci:
    def test_skips_install_when_present(self, mocker, make_settings):
        mocker.patch("lhcheck_core.provisioner.lhci_version", return_value="0.13.0")
        mock_install = mocker.patch("lhcheck_core.provisioner.install_lhci")

        result = ensure_lhci(make_settings())

        mock_install.assert_not_called()
        assert result.ok
        assert result.value == {"installed": False, "version": "0.13.0"}

    def test_installs_once_when_missing(self, mocker, make_settings):
        mocker.patch("lhcheck_core.provisioner.lhci_version", side_effect=[None, "0.13.0"])
        mock_install = mocker.patch("lhcheck_core.provisioner.install_lhci")

        result = ensure_lhci(make_settings())

        mock_install.assert_called_once_with("@lhci/cli")
        assert result.value["installed"] is True

    def test_install_failure_propagates(self, mocker, make_settings):
        mocker.patch("lhcheck_core.provisioner.lhci_version", return_value=None)
        err = ToolInstallError(["npm", "install", "-g", "@lhci/cli"], 1, "out", "err")
        mock_install = mocker.patch("lhcheck_core.provisioner.install_lhci", side_effect=err)

        with pytest.raises(ToolInstallError):
            ensure_lhci(make_settings())
        assert mock_install.call_count == 1
