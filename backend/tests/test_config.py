"""
Tests for environment-driven configuration.
"""
from vigil.utils.config import Configuration, EnvMode, DEFAULT_PORTAL_RETURN_URL


class TestConfiguration:
    def test_reads_stripe_and_supabase_settings(self, monkeypatch):
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_abc")
        monkeypatch.setenv("SUPABASE_URL", "https://proj.supabase.co")
        monkeypatch.setenv("ENV_MODE", "production")

        cfg = Configuration()

        assert cfg.STRIPE_SECRET_KEY == "sk_test_abc"
        assert cfg.SUPABASE_URL == "https://proj.supabase.co"
        assert cfg.ENV_MODE == EnvMode.PRODUCTION

    def test_invalid_env_mode_defaults_to_local(self, monkeypatch):
        monkeypatch.setenv("ENV_MODE", "qa")

        assert Configuration().ENV_MODE == EnvMode.LOCAL

    def test_vite_supabase_url_fallback(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setenv("VITE_SUPABASE_URL", "https://vite.supabase.co")

        assert Configuration().SUPABASE_URL == "https://vite.supabase.co"

    def test_portal_return_url_prefers_configured_value(self, monkeypatch):
        monkeypatch.setenv("STRIPE_PORTAL_RETURN_URL", "https://app.example/settings")

        assert Configuration().portal_return_url == "https://app.example/settings"

    def test_portal_return_url_literal_fallback(self, monkeypatch):
        monkeypatch.delenv("STRIPE_PORTAL_RETURN_URL", raising=False)

        assert Configuration().portal_return_url == DEFAULT_PORTAL_RETURN_URL
