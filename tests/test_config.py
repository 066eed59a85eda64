import os
import unittest
from unittest import mock

from sqlalchemy.engine import make_url

from lottery.config import ProductionConfig, get_config, resolve_database_url


class ResolveDatabaseUrlTests(unittest.TestCase):
    def test_explicit_url_wins(self):
        env = {"DATABASE_URL": "postgresql+psycopg2://u:p@db/x", "DB_HOST": "ignored"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(resolve_database_url(), "postgresql+psycopg2://u:p@db/x")

    def test_built_from_mysql_settings(self):
        env = {
            "DB_HOST": "10.0.0.5",
            "DB_USER": "lottery",
            "DB_PASSWORD": "s3cret",
            "DB_NAME": "draws",
            "DB_PORT": "3307",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            url = make_url(resolve_database_url())

        self.assertEqual(url.drivername, "mysql+pymysql")
        self.assertEqual(url.host, "10.0.0.5")
        self.assertEqual(url.port, 3307)
        self.assertEqual(url.username, "lottery")
        self.assertEqual(url.password, "s3cret")
        self.assertEqual(url.database, "draws")

    def test_bad_port_falls_back_to_default(self):
        env = {"DB_HOST": "h", "DB_USER": "u", "DB_NAME": "d", "DB_PORT": "abc"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertEqual(make_url(resolve_database_url()).port, 3306)

    def test_local_sqlite_fallback(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_database_url(), "sqlite:///./lottery.db")


class GetConfigTests(unittest.TestCase):
    def test_production_selected_by_app_env(self):
        with mock.patch.dict(os.environ, {"APP_ENV": " Production "}):
            self.assertIs(get_config(), ProductionConfig)


if __name__ == "__main__":
    unittest.main()
