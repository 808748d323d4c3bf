import pytest

from shortlink.constants import ENV


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Run every test as a deployed (non-local) environment without AppConfig settings."""
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    for name in (
        ENV.App.APP_NAME,
        ENV.App.PROJECT_ROOT,
        ENV.App.AWS_SAM_LOCAL,
        ENV.AppConfig.APP_ID,
        ENV.AppConfig.ENV_ID,
        ENV.AppConfig.PROFILE_ID,
        ENV.AppConfig.AGENT_URL,
        ENV.AppConfig.PROFILE_NAME,
    ):
        monkeypatch.delenv(name, raising=False)
