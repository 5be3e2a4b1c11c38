import dac
from dac import version


def test_package_reports_base_version_by_default(monkeypatch):
    monkeypatch.delenv("DAC_VERSION", raising=False)
    assert version.build_version() == version.BASE_VERSION
    assert dac.get_version() == version.__version__


def test_build_label_override(monkeypatch):
    monkeypatch.setenv("DAC_VERSION", "0.1.0+charity.7")
    assert version.build_version() == "0.1.0+charity.7"
